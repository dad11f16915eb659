# backend/creatoraide/__init__.py
