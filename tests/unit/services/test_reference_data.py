"""Tests for reference data loading and lookups."""

import pytest
import yaml

from paperrank.models.profile import ExperienceType, UserProfile
from paperrank.services.reference_data import (
    ReferenceData,
    get_default_reference_data,
    load_reference_data,
)
from paperrank.utils.exceptions import ReferenceDataError


def write_data(tmp_path, vocabulary, journals):
    (tmp_path / "vocabulary.yaml").write_text(yaml.dump(vocabulary))
    (tmp_path / "journals.yaml").write_text(yaml.dump(journals))
    return tmp_path


class TestBundledData:
    """Tests against the bundled vocabulary and journal catalog."""

    @pytest.fixture
    def reference(self) -> ReferenceData:
        return get_default_reference_data()

    def test_dictionary_sizes(self, reference):
        assert len(reference.interest_keywords) == 52
        assert len(reference.method_keywords) == 34
        assert len(reference.journals) == 92

    def test_every_interest_has_concepts(self, reference):
        assert set(reference.interest_keywords) <= set(reference.interest_concepts)

    def test_cached(self, reference):
        assert get_default_reference_data() is reference

    def test_find_journal_exact(self, reference):
        journal = reference.find_journal("American Economic Review")
        assert journal.tier == 1
        assert journal.field == "economics"

    def test_find_journal_case_insensitive(self, reference):
        assert reference.find_journal("american economic review").name == "American Economic Review"

    def test_find_journal_alt_name(self, reference):
        assert reference.find_journal("NBER").name == "NBER Working Papers"

    def test_find_journal_unknown(self, reference):
        assert reference.find_journal("Journal of Imaginary Results") is None
        assert reference.find_journal(None) is None

    def test_adjacent_fields(self, reference):
        assert reference.is_adjacent_field("Psychology") is True
        assert reference.is_adjacent_field("economics") is False
        assert reference.is_adjacent_field(None) is False

    @pytest.mark.parametrize(
        "profile",
        [
            UserProfile(primary_field="Interdisciplinary / Multiple Fields"),
            UserProfile(academic_level="Curious Learner"),
            UserProfile(experience_type=ExperienceType.EXPLORER),
        ],
    )
    def test_generalist_detection(self, reference, profile):
        assert reference.is_generalist(profile) is True

    def test_specialist(self, reference):
        profile = UserProfile(academic_level="PhD Student", primary_field="Econometrics")
        assert reference.is_generalist(profile) is False


class TestLoadReferenceData:
    """Tests for load_reference_data."""

    def test_custom_directory(self, tmp_path):
        data_dir = write_data(
            tmp_path,
            {
                "adjacent_fields": ["psychology"],
                "interest_keywords": {"Housing": {"canonical": "housing", "synonyms": ["rent"]}},
                "approach_signals": {"quantitative": ["regression"], "qualitative": []},
            },
            {"journals": [{"name": "Journal of Urban Economics", "field": "economics", "tier": 2}]},
        )
        reference = load_reference_data(data_dir)
        assert reference.interest_keywords["Housing"].synonyms == ["rent"]
        assert reference.quantitative_signals == ["regression"]
        assert reference.find_journal("journal of urban economics").tier == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(ReferenceDataError, match="not found"):
            load_reference_data(tmp_path)

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "vocabulary.yaml").write_text("interest_keywords: {{{{")
        (tmp_path / "journals.yaml").write_text("journals: []")
        with pytest.raises(ReferenceDataError, match="Invalid YAML"):
            load_reference_data(tmp_path)

    def test_invalid_entry(self, tmp_path):
        data_dir = write_data(
            tmp_path, {}, {"journals": [{"name": "Odd Journal", "field": "economics", "tier": 9}]}
        )
        with pytest.raises(ReferenceDataError, match="Invalid reference data"):
            load_reference_data(data_dir)

    def test_empty_files_give_empty_data(self, tmp_path):
        (tmp_path / "vocabulary.yaml").write_text("")
        (tmp_path / "journals.yaml").write_text("")
        reference = load_reference_data(tmp_path)
        assert reference.interest_keywords == {}
        assert reference.journals == []
