"""Configuration, auth, database and error types"""
