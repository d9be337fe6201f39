"""Unit tests for the cleanup category registry."""

import pytest
from spacectl.models.category import (
    CATEGORIES,
    VALID_CATEGORY_IDS,
    CategoryId,
    ConfirmationPolicy,
    SafetyLevel,
    get_category,
    is_valid_category_id,
)


class TestCategoryRegistry:
    """Tests for the CATEGORIES mapping."""

    def test_every_id_has_a_descriptor(self) -> None:
        """Each category id maps to a descriptor with the same id."""
        assert set(CATEGORIES) == set(CategoryId)
        for category_id, descriptor in CATEGORIES.items():
            assert descriptor.id is category_id

    def test_valid_ids_match_enum_values(self) -> None:
        """VALID_CATEGORY_IDS holds exactly the enum values."""
        assert {c.value for c in CategoryId} == VALID_CATEGORY_IDS
        assert len(VALID_CATEGORY_IDS) == 15

    def test_risky_categories_have_a_note(self) -> None:
        """Risky categories always explain the risk."""
        for descriptor in CATEGORIES.values():
            if descriptor.safety_level == SafetyLevel.RISKY:
                assert descriptor.safety_note

    def test_safety_levels(self) -> None:
        """Spot-check the classification of a few categories."""
        assert CATEGORIES[CategoryId.SYSTEM_CACHE].safety_level == SafetyLevel.SAFE
        assert CATEGORIES[CategoryId.NODE_MODULES].safety_level == SafetyLevel.MODERATE
        assert CATEGORIES[CategoryId.DOWNLOADS].safety_level == SafetyLevel.RISKY


class TestCategoryIdValidation:
    """Tests for is_valid_category_id and get_category."""

    @pytest.mark.parametrize("value", ["trash", "node-modules", CategoryId.DOCKER])
    def test_accepts_known_ids(self, value: object) -> None:
        """Known ids and enum members are valid."""
        assert is_valid_category_id(value)

    @pytest.mark.parametrize("value", ["Trash", "node_modules", "", None, 3, ["trash"]])
    def test_rejects_unknown_values(self, value: object) -> None:
        """Anything outside the closed set is invalid."""
        assert not is_valid_category_id(value)

    def test_get_category_by_string(self) -> None:
        """get_category accepts the string value."""
        assert get_category("trash").name == "Trash"

    def test_get_category_unknown_raises(self) -> None:
        """get_category raises ValueError for unknown ids."""
        with pytest.raises(ValueError):
            get_category("not-a-category")


class TestConfirmationPolicy:
    """Tests for ConfirmationPolicy."""

    def test_risky_categories_need_item_selection(self) -> None:
        """Risky categories are always confirmed item by item."""
        policy = ConfirmationPolicy.from_categories([])

        assert policy.requires_item_selection(CATEGORIES[CategoryId.DOWNLOADS])
        assert not policy.requires_item_selection(CATEGORIES[CategoryId.TRASH])

    def test_extra_categories_need_item_selection(self) -> None:
        """Configured categories are confirmed item by item regardless of level."""
        policy = ConfirmationPolicy.from_categories([CategoryId.NODE_MODULES])

        assert policy.requires_item_selection(CATEGORIES[CategoryId.NODE_MODULES])
        assert not policy.requires_item_selection(CATEGORIES[CategoryId.DEV_CACHE])

    def test_default_policy(self) -> None:
        """The default policy covers large files and iOS backups."""
        policy = ConfirmationPolicy()

        assert CategoryId.LARGE_FILES in policy.per_item_categories
        assert CategoryId.IOS_BACKUPS in policy.per_item_categories
        assert SafetyLevel.RISKY in policy.per_item_levels
