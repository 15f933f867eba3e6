__version__ = "1.0.0"
__description__ = "JSON:API backend for a bookstore: books, authors, comments and users"
