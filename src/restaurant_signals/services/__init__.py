"""
Shared service utilities.

- http.py - ``requests.Session`` factory with default timeout and retry policy
"""
