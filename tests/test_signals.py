from datetime import date

from shortlist.models.models import NOT_FOUND, Education
from shortlist.services.signals import (
    detect_education,
    detect_recent_title,
    estimate_experience,
    experience_ranges,
    first_found,
)

NOW = date(2024, 1, 1)


class TestExperience:
    """Test cases for experience estimation"""

    def test_open_range(self):
        assert estimate_experience("Jan 2019 - Present", now=NOW) == "5.0 yrs"

    def test_ranges_are_summed(self):
        text = "Acme 2015 - 2018\nInitech 2018 to 2020"
        assert estimate_experience(text, now=NOW) == "5.0 yrs"

    def test_duplicate_ranges_counted_once(self):
        text = "Jan 2020 - Jan 2022\nJan 2020 - Jan 2022"
        assert len(experience_ranges(text, now=NOW)) == 1
        assert estimate_experience(text, now=NOW) == "2.0 yrs"

    def test_short_range_in_months(self):
        assert estimate_experience("Jan 2023 - Apr 2023", now=NOW) == "3 mos"

    def test_reversed_range_ignored(self):
        assert experience_ranges("2022 - 2019", now=NOW) == []

    def test_years_phrase(self):
        assert estimate_experience("7+ years of experience in backend work", now=NOW) == "7.0 yrs"
        assert estimate_experience("Over 3 years professional experience", now=NOW) == "3.0 yrs"

    def test_nothing_found(self):
        assert estimate_experience("", now=NOW) == NOT_FOUND


class TestEducation:
    """Test cases for education detection"""

    def test_phd_wins(self):
        assert detect_education("PhD in Physics, B.Sc. Mathematics") == Education.PHD

    def test_masters(self):
        assert detect_education("MSc Computer Science") == Education.MASTERS

    def test_btech(self):
        assert detect_education("B.Tech in Electrical Engineering") == Education.BACHELORS

    def test_diploma(self):
        assert detect_education("Diploma in Web Design") == Education.DIPLOMA

    def test_none(self):
        assert detect_education("Self-taught programmer") == Education.NONE
        assert detect_education("").value == NOT_FOUND


class TestRecentTitle:
    """Test cases for recent title detection"""

    def test_title_from_experience_block(self):
        text = (
            "Jane Doe\njane@example.com\n\n"
            "Experience\nSenior Backend Engineer - Acme Corp\nJan 2020 - Present\n"
        )
        assert detect_recent_title(text) == "Senior Backend Engineer"

    def test_title_with_company_after_at(self):
        assert detect_recent_title("Software Developer at Initech") == "Software Developer"

    def test_sentences_are_not_titles(self):
        assert detect_recent_title("I am an engineer who loves clean code.") == NOT_FOUND

    def test_first_found_order(self):
        attempts = [lambda t: None, lambda t: "second", lambda t: "third"]
        assert first_found(attempts, "x") == "second"
        assert first_found([], "x") == NOT_FOUND
