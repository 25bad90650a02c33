from shortlist.services.text import keywords, strip_edges, tokenize
from shortlist.services.vectors import bag, cosine_similarity


class TestTokenize:
    """Test cases for the tokenizer"""

    def test_keeps_tech_punctuation(self):
        """Test that +, #, / and inner dots survive tokenization"""
        assert list(tokenize("Node.js, C++ and CI/CD!")) == ["node.js", "c++", "and", "ci/cd"]

    def test_strips_sentence_dots(self):
        assert list(tokenize("I write Python.")) == ["i", "write", "python"]

    def test_empty_input(self):
        assert list(tokenize("")) == []
        assert list(tokenize(None)) == []


class TestKeywords:
    """Test cases for keyword filtering"""

    def test_drops_short_words_and_stopwords(self):
        assert keywords(["the", "python", "go", "required"]) == ["python"]

    def test_custom_stopwords(self):
        assert keywords(["python", "django"], stopwords={"django"}) == ["python"]

    def test_strip_edges(self):
        assert strip_edges("(python),") == "python"


class TestCosine:
    """Test cases for bag-of-words cosine"""

    def test_identical_bags(self):
        b = bag(["python", "sql"])
        assert abs(cosine_similarity(b, b) - 1.0) < 1e-9

    def test_empty_bag_is_zero(self):
        assert cosine_similarity(bag([]), bag(["python"])) == 0.0

    def test_disjoint_bags(self):
        assert cosine_similarity(bag(["python"]), bag(["java"])) == 0.0
