import unittest

from app.assessment.catalog import load_company_catalog
from app.assessment.shortlist import build_shortlist
from app.schemas.assessment import CompanyTemplate


def _company(company_id, skills):
    return CompanyTemplate(
        company_id=company_id,
        company_name=company_id.title(),
        role="Engineer",
        required_skills=[{"skill": skill, "weight": weight} for skill, weight in skills],
    )


class BuildShortlistTests(unittest.TestCase):
    def test_weighted_scores_and_ordering(self):
        catalog = load_company_catalog()
        shortlist = build_shortlist(
            skill_scores={"react": 100, "node": 100, "sql": 100},
            claimed_skills=["React", "Node", "SQL"],
            companies=catalog.companies,
        )
        self.assertEqual([fit.company_id for fit in shortlist], ["code-orbit", "pixel-forge", "data-sphere"])
        self.assertEqual([fit.fit_score for fit in shortlist], [40, 30, 30])
        self.assertEqual([fit.claim_coverage for fit in shortlist], [40, 30, 30])
        for fit in shortlist:
            self.assertEqual(fit.fit_score, fit.test_score)

    def test_companies_without_claimed_requirements_are_dropped(self):
        catalog = load_company_catalog()
        shortlist = build_shortlist(
            skill_scores={"python": 80},
            claimed_skills=["Python"],
            companies=catalog.companies,
        )
        self.assertEqual([fit.company_id for fit in shortlist], ["data-sphere"])
        self.assertEqual(shortlist[0].test_score, 24)
        self.assertEqual(shortlist[0].claim_coverage, 30)

    def test_claimed_but_untested_skill_still_covers(self):
        shortlist = build_shortlist(
            skill_scores={},
            claimed_skills=["Go"],
            companies=[_company("alpha", [("Go", 3), ("Rust", 1)])],
        )
        self.assertEqual(len(shortlist), 1)
        self.assertEqual(shortlist[0].fit_score, 0)
        self.assertEqual(shortlist[0].claim_coverage, 75)

    def test_coverage_rounding_to_zero_is_filtered(self):
        shortlist = build_shortlist(
            skill_scores={"go": 100},
            claimed_skills=["go"],
            companies=[_company("tiny", [("Go", 1), ("Rust", 500)])],
        )
        self.assertEqual(shortlist, [])

    def test_ties_keep_catalog_order(self):
        companies = [
            _company("first", [("Go", 1)]),
            _company("second", [("Go", 2)]),
            _company("third", [("Go", 1), ("Rust", 1)]),
        ]
        shortlist = build_shortlist(skill_scores={"go": 50}, claimed_skills=["Go"], companies=companies)
        self.assertEqual([fit.company_id for fit in shortlist], ["first", "second", "third"])
        self.assertEqual([fit.fit_score for fit in shortlist], [50, 50, 25])

    def test_sorted_non_increasing(self):
        companies = [
            _company("low", [("Go", 1), ("Rust", 3)]),
            _company("high", [("Go", 1)]),
            _company("mid", [("Go", 1), ("Rust", 1)]),
        ]
        shortlist = build_shortlist(skill_scores={"go": 90}, claimed_skills=["Go"], companies=companies)
        scores = [fit.fit_score for fit in shortlist]
        self.assertEqual(scores, sorted(scores, reverse=True))
        self.assertEqual([fit.company_id for fit in shortlist], ["high", "mid", "low"])
        self.assertTrue(all(fit.claim_coverage > 0 for fit in shortlist))

    def test_output_has_no_match_count(self):
        shortlist = build_shortlist(skill_scores={}, claimed_skills=["Go"], companies=[_company("a", [("Go", 1)])])
        self.assertNotIn("matched_requirement_count", shortlist[0].model_dump())


if __name__ == "__main__":
    unittest.main()
