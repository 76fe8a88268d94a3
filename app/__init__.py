"""
Job Board Backend
Employers post and manage listings; jobseekers search, save and apply.

Architecture:
- MongoDB: users, jobs, applications, saved jobs (unique indexes guard duplicates)
- Services: plain-dict operations raising typed domain errors
- FastAPI: thin HTTP layer mapping those errors to status codes
"""

__version__ = "1.0.0"
