from __future__ import annotations

from typing import Iterable, Mapping

from app.assessment.skills import normalize_skill, round_half_up
from app.schemas.assessment import CompanyFit, CompanyTemplate


def build_shortlist(
    *,
    skill_scores: Mapping[str, int],
    claimed_skills: Iterable[str],
    companies: Iterable[CompanyTemplate],
) -> list[CompanyFit]:
    """Rank companies by weighted test score over their required skills.

    `skill_scores` is keyed by normalized skill. Companies whose required skills
    never appear among the claimed skills are dropped. Ties keep catalog order.
    """
    claimed = {normalize_skill(skill) for skill in claimed_skills}
    ranked: list[CompanyFit] = []

    for company in companies:
        total_weight = sum(item.weight for item in company.required_skills) or 1
        weighted_test_score = 0
        weighted_claim_coverage = 0
        matched_requirement_count = 0

        for requirement in company.required_skills:
            token = normalize_skill(requirement.skill)
            test_contribution = skill_scores.get(token, 0)
            claim_contribution = 100 if token in claimed else 0
            if claim_contribution > 0:
                matched_requirement_count += 1
            weighted_test_score += test_contribution * requirement.weight
            weighted_claim_coverage += claim_contribution * requirement.weight

        test_score = round_half_up(weighted_test_score / total_weight)
        claim_coverage = round_half_up(weighted_claim_coverage / total_weight)
        if matched_requirement_count == 0 or claim_coverage == 0:
            continue

        ranked.append(
            CompanyFit(
                company_id=company.company_id,
                company_name=company.company_name,
                role=company.role,
                fit_score=test_score,
                test_score=test_score,
                claim_coverage=claim_coverage,
            )
        )

    ranked.sort(key=lambda item: item.fit_score, reverse=True)
    return ranked
