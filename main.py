import asyncio
import logging
import sys
import json
import argparse
from dataclasses import asdict
from typing import Any, Dict, Optional

from core.app_context import AppContext
from core.config_loader import load_config
from core.exceptions import NotFoundError, PersistenceError
from core.models import ScoreWeights
from database.store import SqlAlchemyStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def load_json_file(path: str) -> Optional[Any]:
    """Load a JSON document from disk."""
    logger.info(f"Loading {path}")
    try:
        with open(path, 'r') as f:
            return json.load(f)
    except FileNotFoundError:
        logger.error(f"File not found: {path}")
        return None
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {path}: {e}")
        return None


def parse_weights(raw: Optional[str], default: ScoreWeights) -> ScoreWeights:
    if not raw:
        return default
    return ScoreWeights.from_dict(json.loads(raw))


async def seed(ctx: AppContext, data: Dict[str, Any]) -> None:
    """Insert jobs and candidates from a ``{"jobs": [...], "candidates": [...]}`` document."""
    store = ctx.store
    if not isinstance(store, SqlAlchemyStore):
        raise ValueError("Seeding requires the SQL store")

    for job in data.get('jobs', []):
        created = await store.add_job(
            title=job['title'],
            description=job.get('description', ''),
            must=job.get('must', []),
            nice=job.get('nice', []),
        )
        logger.info(f"Seeded job {created.id}: {created.title}")

    for candidate in data.get('candidates', []):
        created = await store.add_candidate(
            name=candidate['name'],
            years_experience=candidate.get('years_experience'),
            last_role_title=candidate.get('last_role_title'),
            skills=candidate.get('skills', []),
            experience_gaps=candidate.get('experience_gaps', []),
        )
        logger.info(f"Seeded candidate {created.id}: {created.name}")


async def run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    ctx = AppContext.build(config)
    service = ctx.service
    weights = parse_weights(getattr(args, 'weights', None), config.scoring.default_weights)

    if args.command == 'seed':
        data = load_json_file(args.file)
        if data is None:
            return 1
        await seed(ctx, data)
        return 0

    if args.command == 'score':
        if args.save:
            result = await service.score_and_save(args.candidate_id, args.job_id, weights)
        else:
            result = await service.score_candidate(args.candidate_id, args.job_id, weights)
        print(json.dumps(asdict(result), indent=2))
        return 0

    if args.command == 'rescore':
        results = await service.rescore_job(args.job_id, weights)
        summary = sorted(
            ({'candidateId': cid, 'totalScore': b.total_score} for cid, b in results.items()),
            key=lambda r: r['totalScore'],
            reverse=True,
        )
        print(json.dumps(summary, indent=2))
        return 0

    if args.command == 'rank':
        rankings = await service.rank_candidates_for_job(args.job_id, use_cache=not args.no_cache)
        print(json.dumps(
            [{'candidateId': r.candidate_id, 'rank': r.rank, 'reason': r.reason} for r in rankings],
            indent=2,
        ))
        return 0

    return 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Candidate scoring and AI ranking')
    parser.add_argument('--config', default='config.yaml', help='Path to config.yaml')
    sub = parser.add_subparsers(dest='command', required=True)

    seed_parser = sub.add_parser('seed', help='Load jobs and candidates from a JSON file')
    seed_parser.add_argument('file')

    score_parser = sub.add_parser('score', help='Score one candidate against a job')
    score_parser.add_argument('candidate_id', type=int)
    score_parser.add_argument('job_id', type=int)
    score_parser.add_argument('--weights', help='JSON object of factor weights')
    score_parser.add_argument('--save', action='store_true', help='Persist the score record')

    rescore_parser = sub.add_parser('rescore', help='Score and persist every candidate for a job')
    rescore_parser.add_argument('job_id', type=int)
    rescore_parser.add_argument('--weights', help='JSON object of factor weights')

    rank_parser = sub.add_parser('rank', help='AI-rank all candidates for a job')
    rank_parser.add_argument('job_id', type=int)
    rank_parser.add_argument('--no-cache', action='store_true')

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run(args))
    except NotFoundError as e:
        logger.error(str(e))
        return 1
    except PersistenceError as e:
        logger.error(f"Store failure: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
