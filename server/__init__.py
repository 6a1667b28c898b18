"""HTTP server package for Inkwell."""
