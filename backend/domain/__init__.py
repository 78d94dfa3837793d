"""Domain layer of the meal photo analysis service.

Business logic independent of the HTTP endpoints and of the presentation.
"""
