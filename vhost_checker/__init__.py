"""Deployment checker for web server virtual hosts."""
