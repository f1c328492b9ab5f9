import contextlib
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session, sessionmaker

from database.repositories import JobRepository, CandidateRepository, ScoreRepository

logger = logging.getLogger(__name__)


@dataclass
class ScoringUnitOfWork:
    """Repositories sharing one Session (and therefore one transaction)."""
    session: Session
    jobs: JobRepository
    candidates: CandidateRepository
    scores: ScoreRepository


@contextlib.contextmanager
def scoring_uow(session_factory: sessionmaker):
    """Per-unit-of-work transaction scope.

    Yields a ScoringUnitOfWork bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with scoring_uow(SessionLocal) as uow:
            job = uow.jobs.get_by_id(job_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    session = session_factory()
    try:
        yield ScoringUnitOfWork(
            session=session,
            jobs=JobRepository(session),
            candidates=CandidateRepository(session),
            scores=ScoreRepository(session),
        )
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
