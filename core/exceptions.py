#!/usr/bin/env python3
"""
Custom exceptions for the scoring and ranking services.
"""

from typing import Any


class ServiceException(Exception):
    """Base exception for service layer errors."""
    pass


class NotFoundError(ServiceException):
    """Raised when a candidate or job cannot be resolved by the store."""
    pass


class JobNotFoundError(NotFoundError):
    """Raised when a job is not found."""

    def __init__(self, job_id: Any):
        self.job_id = job_id
        super().__init__(f"Job {job_id} not found")


class CandidateNotFoundError(NotFoundError):
    """Raised when a candidate is not found."""

    def __init__(self, candidate_id: Any):
        self.candidate_id = candidate_id
        super().__init__(f"Candidate {candidate_id} not found")


class UpstreamUnavailableError(ServiceException):
    """Raised when a similarity or ranking collaborator cannot be reached."""
    pass


class MalformedUpstreamResponseError(ServiceException):
    """Raised when a collaborator answered with an unusable payload."""
    pass


class PersistenceError(ServiceException):
    """Raised when the store fails to read or write."""
    pass
