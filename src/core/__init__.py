"""Core domain package for loginwatch.

Core contains tailing, pattern matching, and deduplication logic without any
Telegram or camera-specific code, keeping the business logic portable.
"""
