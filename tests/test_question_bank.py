import unittest

from app.assessment.catalog import load_company_catalog
from app.assessment.question_bank import (
    INTERVIEW_QUESTION_WEIGHT,
    RoleCategory,
    interview_rounds_for_company,
    new_id,
    questions_for_skill,
    role_category,
    strip_answer_key,
)
from app.schemas.assessment import CompanyTemplate


class QuestionsForSkillTests(unittest.TestCase):
    def test_generic_questions_reference_the_skill(self):
        questions = questions_for_skill("docker")
        self.assertEqual(len(questions), 2)
        self.assertIn("real-world use of Docker", questions[0].prompt)
        self.assertIn("You claimed Docker", questions[1].prompt)
        for question in questions:
            self.assertEqual(question.skill, "Docker")
            self.assertEqual(question.correct_answer, 0)
            self.assertEqual(question.weight, 50)
            self.assertEqual(question.type, "mcq")
            self.assertGreaterEqual(len(question.options), 2)

    def test_known_skills_get_factual_first_question(self):
        sql = questions_for_skill("sql")
        self.assertIn("salary > 50000", sql[0].prompt)
        self.assertEqual(sql[0].options[sql[0].correct_answer], "SELECT * FROM employees WHERE salary > 50000 ORDER BY salary DESC;")
        self.assertIn("You claimed SQL", sql[1].prompt)

        react = questions_for_skill("React")
        self.assertEqual(react[0].options[react[0].correct_answer], "useState")

        node = questions_for_skill("Node")
        self.assertIn("Node.js", node[0].prompt)

    def test_ids_are_unique(self):
        ids = [question.id for _ in range(50) for question in questions_for_skill("Python")]
        self.assertEqual(len(ids), len(set(ids)))
        self.assertTrue(all(item.startswith("q_") for item in ids))

    def test_new_id_has_base36_suffix(self):
        identifier = new_id("test")
        prefix, suffix = identifier.split("_", 1)
        self.assertEqual(prefix, "test")
        self.assertEqual(len(suffix), 8)
        self.assertTrue(all(ch in "0123456789abcdefghijklmnopqrstuvwxyz" for ch in suffix))


class StripAnswerKeyTests(unittest.TestCase):
    def test_public_view_has_no_answer(self):
        question = questions_for_skill("React")[0]
        public = strip_answer_key(question)
        dumped = public.model_dump(by_alias=True)
        self.assertNotIn("correctAnswer", dumped)
        self.assertNotIn("correct_answer", public.model_dump())
        self.assertEqual(public.id, question.id)
        self.assertEqual(public.options, question.options)


class RoleCategoryTests(unittest.TestCase):
    def test_dispatch(self):
        self.assertIs(role_category("Frontend Developer"), RoleCategory.FRONTEND)
        self.assertIs(role_category("Data Analyst"), RoleCategory.DATA)
        self.assertIs(role_category("Backend Developer"), RoleCategory.GENERIC)
        self.assertIs(role_category(""), RoleCategory.GENERIC)
        self.assertIs(role_category("Frontend Data Engineer"), RoleCategory.FRONTEND)


class InterviewRoundsTests(unittest.TestCase):
    def setUp(self):
        self.catalog = load_company_catalog()

    def test_frontend_rounds(self):
        rounds = interview_rounds_for_company(self.catalog.find_company("pixel-forge"))
        self.assertEqual([r.title for r in rounds], ["Technical Basics", "Applied Scenarios", "Debug & Decision"])
        self.assertEqual([len(r.questions) for r in rounds], [3, 2, 1])
        self.assertEqual([q.skill for q in rounds[0].questions], ["React", "Javascript", "Typescript"])
        self.assertIn("component tree", rounds[1].questions[0].prompt)
        self.assertEqual(rounds[1].questions[0].skill, "React")
        self.assertIn("Javascript ownership", rounds[1].questions[1].prompt)
        self.assertEqual(rounds[2].questions[0].type, "debug")
        self.assertIn("React form", rounds[2].questions[0].prompt)
        for round_ in rounds:
            for question in round_.questions:
                self.assertEqual(question.weight, INTERVIEW_QUESTION_WEIGHT)
                self.assertEqual(question.correct_answer, 0)

    def test_data_and_generic_branches(self):
        data_rounds = interview_rounds_for_company(self.catalog.find_company("data-sphere"))
        self.assertIn("dashboard metric", data_rounds[1].questions[0].prompt)
        self.assertIn("JOIN", data_rounds[2].questions[0].prompt)

        backend_rounds = interview_rounds_for_company(self.catalog.find_company("code-orbit"))
        self.assertIn("API latency", backend_rounds[1].questions[0].prompt)
        self.assertIn("stale values", backend_rounds[2].questions[0].prompt)

    def test_single_skill_company_uses_default_debug_skill(self):
        company = CompanyTemplate(
            company_id="solo",
            company_name="Solo",
            role="Platform Engineer",
            required_skills=[{"skill": "Go", "weight": 10}],
        )
        rounds = interview_rounds_for_company(company)
        self.assertEqual(len(rounds[0].questions), 1)
        self.assertEqual(len(rounds[1].questions), 1)
        self.assertEqual(rounds[1].questions[0].skill, "Go")
        self.assertEqual(rounds[2].questions[0].skill, "Apis")

    def test_round_and_question_ids_unique(self):
        rounds = interview_rounds_for_company(self.catalog.find_company("code-orbit"))
        round_ids = [r.round_id for r in rounds]
        question_ids = [q.id for r in rounds for q in r.questions]
        self.assertEqual(len(round_ids), len(set(round_ids)))
        self.assertEqual(len(question_ids), len(set(question_ids)))


if __name__ == "__main__":
    unittest.main()
