from .base import Base
from .job import JobOpening, JobSkillRequirement
from .candidate import CandidateProfile, CandidateSkill
from .score import CandidateScore

__all__ = [
    'Base',
    'JobOpening',
    'JobSkillRequirement',
    'CandidateProfile',
    'CandidateSkill',
    'CandidateScore',
]
