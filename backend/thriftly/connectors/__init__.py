"""External service connectors"""
