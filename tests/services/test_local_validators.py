# tests/services/test_local_validators.py
import pytest

from app.models.category import CategoryPublic
from app.models.enums import ValidationStatus
from app.services.validators.base import CategoryValidator
from app.services.validators.cache_validator import CacheValidator
from app.services.validators.fixed_list_validator import FixedListValidator

ANIMAL = CategoryPublic(name="ANIMAL", display_name="Animal")
MARQUE = CategoryPublic(name="MARQUE", display_name="Brand")

class InMemoryCache:
    def __init__(self, entries=()):
        self.entries = set(entries)

    def has(self, word, category_name):
        return (word, category_name) in self.entries

    def put(self, word, category_name):
        self.entries.add((word, category_name))

def test_validators_satisfy_the_capability_contract():
    assert isinstance(CacheValidator(InMemoryCache()), CategoryValidator)
    assert isinstance(FixedListValidator(), CategoryValidator)

def test_cache_hit_is_valid_with_fixed_confidence():
    validator = CacheValidator(InMemoryCache({("chien", "ANIMAL")}))
    result = validator.validate("  Chien ", ANIMAL)

    assert result.status == ValidationStatus.VALID
    assert result.confidence == pytest.approx(0.90)
    assert result.source == "cache"

def test_cache_miss_defers_instead_of_rejecting():
    result = CacheValidator(InMemoryCache()).validate("zzxqp", ANIMAL)
    assert result.status == ValidationStatus.UNCERTAIN
    assert result.confidence == 0.0

def test_cache_read_failures_propagate(mocker):
    cache = mocker.MagicMock()
    cache.has.side_effect = RuntimeError("database is locked")
    with pytest.raises(RuntimeError):
        CacheValidator(cache).validate("chien", ANIMAL)

def test_fixed_list_match_is_definitive():
    result = FixedListValidator().validate("Éléphant", ANIMAL)
    assert result.status == ValidationStatus.VALID
    assert result.confidence == 1.0
    assert result.source == "deterministic-list"

def test_fixed_list_miss_and_unknown_category_defer():
    validator = FixedListValidator()
    miss = validator.validate("zzxqp", ANIMAL)
    unsupported = validator.validate("nike", MARQUE)

    assert miss.status == ValidationStatus.UNCERTAIN
    assert unsupported.status == ValidationStatus.UNCERTAIN
    assert "No word list" in unsupported.details

def test_fixed_list_add_word_at_runtime():
    validator = FixedListValidator(word_lists={"ANIMAL": ["chien"]})

    assert validator.add_word("animal", "Dauphin") is True
    assert validator.add_word("ANIMAL", "dauphin") is False
    assert validator.add_word("ANIMAL", "  ") is False
    assert validator.add_word("marque", "Nike") is True

    assert validator.validate("dauphin", ANIMAL).is_valid
    assert validator.validate("nike", MARQUE).is_valid
    assert "MARQUE" in validator.supported_categories()

def test_empty_word_never_reaches_the_lists():
    result = FixedListValidator().validate("   ", ANIMAL)
    assert result.status == ValidationStatus.UNCERTAIN
