"""Core domain package for scamscope.

Core contains prompt building, response parsing, classification, the
conversation log and the turn workflow without any HTTP, SQLite or UI
specific code, keeping the business logic portable.
"""
