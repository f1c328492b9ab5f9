RANKING_SYSTEM_PROMPT = """
You are a technical recruiter who evaluates candidates using a strict, consistent scoring framework.
Always return valid JSON with complete rankings for all candidates.
""".strip()


RANKING_USER_PROMPT_TEMPLATE = """
Rank these {count} candidates for the {job_title} position.

Job Requirements
- Must-have skills: {must}
- Nice-to-have skills: {nice}

Candidates
{candidates}

Scoring framework
- Technical fit (40 pts): must-have coverage first, then nice-to-have and skill depth.
- Experience (30 pts): relevant, recent experience outweighs raw years.
- Potential (20 pts): trajectory and adaptability.
- Risk (10 pts): employment gaps, skill mismatches.

Hard rules
- Roles marked "(inferred)" were guessed from names or skills, not parsed from a CV. Give them less weight.
- Rank every candidate exactly once, from 1 (best fit) to {count} (lowest fit). No shared ranks.
- Use the candidate IDs exactly as given.

Respond with JSON in this exact format:
{{
  "rankings": [
    {{"candidateId": 123, "rank": 1, "reason": "brief, specific reason"}}
  ]
}}
""".strip()


CANDIDATE_LINE_TEMPLATE = (
    "{position}. {name} (ID: {id})\n"
    "   - Experience: {years} years\n"
    "   - Last Role: {role}\n"
    "   - Skills ({skill_count}): {skills}\n"
    "   - Skill Match: {skill_match}%\n"
    "   - Current Score: {current_score}\n"
    "   - Missing Must-Have Skills: {missing}\n"
    "   - Experience Gaps: {gaps} periods"
)
