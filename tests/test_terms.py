from shortlist.models.settings import ScoringConfig, ScoringThresholds, default_config
from shortlist.services.terms import (
    acronyms,
    domain_terms,
    extract_terms,
    is_generic,
    known_skills_in,
    section_windows,
    term_in_text,
)


class TestDomainTerms:
    """Test cases for JD domain term discovery"""

    def test_acronyms_are_lowercased(self):
        assert acronyms("Experience with AWS and GCP on Linux", default_config()) == ["aws", "gcp"]

    def test_known_skills_via_synonyms(self):
        found = known_skills_in("We ship Node.js and ReactJS apps", default_config())
        assert "node" in found
        assert "react" in found

    def test_known_skills_need_whole_words(self):
        assert "java" not in known_skills_in("Strong JavaScript skills", default_config())

    def test_frequent_terms_need_two_mentions(self):
        terms = domain_terms("Kafka pipelines. Kafka streaming. Airflow once.")
        assert "kafka" in terms
        assert "airflow" not in terms

    def test_generic_terms_filtered(self):
        assert is_generic("years experience")
        assert is_generic("team")
        assert not is_generic("python")
        terms = domain_terms("Team work. Team work. Python.")
        assert "team" not in terms
        assert "team work" not in terms


class TestSectionWindows:
    """Test cases for must/nice section windows"""

    def test_windows_stop_at_next_marker(self):
        must, nice = section_windows("Required: AWS. Preferred: GCP.")
        assert must == [": aws. "]
        assert nice == [": gcp."]

    def test_no_markers(self):
        assert section_windows("We build things.") == ([], [])


class TestExtractTerms:
    """Test cases for must/nice term extraction"""

    def test_must_and_nice_sections(self):
        terms = extract_terms("Must have: Python, SQL. Nice to have: Docker.")
        assert set(terms.must_terms) == {"python", "sql"}
        assert terms.nice_terms == ["docker"]

    def test_nice_excludes_must(self):
        terms = extract_terms("Required: Python. Preferred: Python, Docker.")
        assert "python" in terms.must_terms
        assert "python" not in terms.nice_terms
        assert "docker" in terms.nice_terms

    def test_fallback_without_markers(self):
        """Test that the top JD terms become must-haves when no section markers exist"""
        terms = extract_terms("We build python services with docker. Python and docker daily.")
        assert set(terms.must_terms) == {"python", "docker"}
        assert terms.nice_terms == []

    def test_empty_jd(self):
        terms = extract_terms("")
        assert terms.must_terms == []
        assert terms.nice_terms == []
        assert terms.domain_terms == []

    def test_fallback_splits_eight_and_eight(self):
        """Test the must/nice split when the JD has no section markers"""
        jd = (
            "Our stack: javascript, typescript, react, node, python, java, sql, mongodb, "
            "postgres, mysql, aws, gcp, azure, docker, kubernetes, jenkins, ruby, php."
        )
        terms = extract_terms(jd)
        assert terms.must_terms == ["javascript", "typescript", "react", "node", "python", "java", "sql", "mongodb"]
        assert terms.nice_terms == ["postgres", "mysql", "aws", "gcp", "azure", "docker", "kubernetes", "jenkins"]

    def test_fallback_never_repeats_must_terms(self):
        terms = extract_terms("Preferred: python, docker.")
        assert terms.must_terms == ["python", "docker"]
        assert terms.nice_terms == []

    def test_must_terms_capped_at_ten(self):
        jd = "Must have: python, java, sql, aws, gcp, azure, docker, git, kafka, spark, linux, bash, terraform."
        terms = extract_terms(jd)
        assert len(terms.domain_terms) == 13
        assert terms.must_terms == [
            "python", "java", "sql", "aws", "gcp", "azure", "docker", "git", "kafka", "spark",
        ]

    def test_nice_terms_capped_at_ten(self):
        jd = (
            "Required: python. Preferred: react, node, mongodb, postgres, mysql, "
            "kubernetes, jenkins, ruby, php, css, jira, scrum."
        )
        terms = extract_terms(jd)
        assert terms.must_terms == ["python"]
        assert terms.nice_terms == [
            "react", "node", "mongodb", "postgres", "mysql", "kubernetes", "jenkins", "ruby", "php", "css",
        ]

    def test_custom_limits(self):
        config = ScoringConfig(limits={"max_list_terms": 2})
        terms = extract_terms("Must have: python, java, sql.", config)
        assert terms.must_terms == ["python", "java"]


class TestTermInText:
    """Test cases for term presence in resume or window text"""

    def test_short_terms_need_whole_words(self):
        cfg = default_config()
        assert not term_in_text("javascript and html5", "java", cfg)
        assert not term_in_text("a keen interest in design", "rest", cfg)
        assert not term_in_text("digital marketing", "git", cfg)
        assert term_in_text("java, git and rest apis", "java", cfg)
        assert term_in_text("versioned with git.", "git", cfg)

    def test_synonyms(self):
        cfg = default_config()
        assert term_in_text("node.js services", "node", cfg)
        assert term_in_text("ran k8s clusters", "kubernetes", cfg)

    def test_longer_terms_stay_fuzzy(self):
        assert term_in_text("deployed with kubernetees", "kubernetes", default_config())

    def test_whole_word_length_is_configurable(self):
        config = ScoringConfig(thresholds=ScoringThresholds(whole_word_max_len=0))
        assert term_in_text("javascript", "java", config)
