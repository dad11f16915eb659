# backend/creatoraide/services/__init__.py
