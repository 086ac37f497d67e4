"""Image upload and storage module for Smart Farm.

This module handles image uploads for plots, activities and general use.
Files are stored on the local disk under a fixed set of folders and served
back as static content from the same relative path.

Supported file types:
- Images: jpg, jpeg, png, gif, webp
- Max 5MB per file, max 10 files per request

Stored files are only removed by an explicit delete request.
"""
