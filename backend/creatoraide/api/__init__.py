# backend/creatoraide/api/__init__.py
