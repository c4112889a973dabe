"""
Unit tests for link_parsing.normalizer.

Pure functions only - no network.
"""

import pytest

from link_parsing.normalizer import (
    CATEGORIES,
    DEFAULT_CATEGORY,
    adjust_cost_for_price_range,
    build_manual_input_suggestion,
    build_suggestion,
    determine_category,
    enhance_google_image_url,
    estimate_cost_by_category,
    estimate_duration_by_category,
    is_valid_absolute_url,
    process_image_url,
    rating_to_excitement,
    truncate_text,
)


class TestDetermineCategory:
    """Tests for determine_category()"""

    def test_restaurant_is_food(self):
        assert determine_category("Joe's Pizza", "") == "Food & Dining"

    def test_movie_is_entertainment(self):
        assert determine_category("AMC Cinema 12", "") == "Entertainment"

    def test_trail_is_outdoor(self):
        assert determine_category("Eagle Peak Trail", "") == "Outdoor"

    def test_spa_is_relaxation(self):
        assert determine_category("Serenity Spa", "") == "Relaxation"

    def test_climbing_gym_is_adventure(self):
        assert determine_category("Brooklyn Boulders", "climbing gym") == "Adventure"

    def test_hotel_is_travel(self):
        assert determine_category("Grand Hotel", "") == "Travel"

    def test_wine_is_date_night(self):
        assert determine_category("Vintner's Lounge", "wine tasting") == "Date Night"

    def test_museum_is_cultural(self):
        assert determine_category("Natural History Museum", "") == "Cultural"

    def test_mall_is_shopping(self):
        assert determine_category("Westfield Mall", "") == "Shopping"

    def test_food_wins_over_movie(self):
        # Food & Dining is tested before Entertainment
        assert determine_category("Dinner and a movie", "food court") == "Food & Dining"

    def test_content_is_considered(self):
        assert determine_category("Somewhere", "a lovely beach") == "Outdoor"

    def test_case_insensitive(self):
        assert determine_category("RESTAURANT", "") == "Food & Dining"

    def test_no_match_defaults_to_entertainment(self):
        assert determine_category("Xyz", "qwerty") == DEFAULT_CATEGORY

    def test_none_inputs(self):
        assert determine_category(None, None) == DEFAULT_CATEGORY

    @pytest.mark.parametrize("title", [
        "", "Joe's Pizza", "Zoo", "Random words", "Gallery 5", "???", "Resort & Spa",
    ])
    def test_always_in_fixed_set(self, title):
        assert determine_category(title, "") in CATEGORIES


class TestCostAndDuration:
    """Tests for estimate_cost_by_category() and estimate_duration_by_category()"""

    def test_food_cost_and_duration(self):
        assert estimate_cost_by_category("Food & Dining") == 50
        assert estimate_duration_by_category("Food & Dining") == 90

    def test_travel_cost_and_duration(self):
        assert estimate_cost_by_category("Travel") == 200
        assert estimate_duration_by_category("Travel") == 480

    def test_unknown_category_defaults(self):
        assert estimate_cost_by_category("Knitting") == 25
        assert estimate_duration_by_category("Knitting") == 120

    def test_every_category_has_entries(self):
        for category in CATEGORIES:
            assert estimate_cost_by_category(category) >= 0
            assert estimate_duration_by_category(category) > 0


class TestAdjustCostForPriceRange:
    """Tests for adjust_cost_for_price_range()"""

    def test_three_dollar_signs_raise_food_cost(self):
        assert adjust_cost_for_price_range(50, "$$$") == 60

    def test_four_dollar_signs_floor(self):
        assert adjust_cost_for_price_range(50, "$$$$") == 100

    def test_two_dollar_signs_keep_higher_default(self):
        assert adjust_cost_for_price_range(50, "$$") == 50

    def test_two_dollar_signs_raise_low_default(self):
        assert adjust_cost_for_price_range(10, "$$") == 30

    def test_single_dollar_is_a_ceiling(self):
        assert adjust_cost_for_price_range(50, "$") == 25
        assert adjust_cost_for_price_range(10, "$") == 10

    def test_price_range_with_surrounding_text(self):
        assert adjust_cost_for_price_range(50, "Price range $$$ (expensive)") == 60

    def test_missing_price_range(self):
        assert adjust_cost_for_price_range(50, None) == 50
        assert adjust_cost_for_price_range(50, "") == 50
        assert adjust_cost_for_price_range(50, "moderate") == 50


class TestRatingToExcitement:
    """Tests for rating_to_excitement()"""

    def test_four_and_a_half(self):
        assert rating_to_excitement(4.5) == 9

    def test_zero(self):
        assert rating_to_excitement(0) == 0

    def test_five(self):
        assert rating_to_excitement(5) == 10

    def test_rounds_half_up(self):
        assert rating_to_excitement(2.25) == 5

    def test_none_is_no_signal(self):
        assert rating_to_excitement(None) == 0

    def test_invalid_is_no_signal(self):
        assert rating_to_excitement("n/a") == 0

    def test_capped_at_ten(self):
        assert rating_to_excitement(45) == 10

    @pytest.mark.parametrize("rating", [0, 0.1, 1, 2.5, 3.3, 3.75, 4.9, 5])
    def test_always_in_range(self, rating):
        excitement = rating_to_excitement(rating)
        assert isinstance(excitement, int)
        assert 0 <= excitement <= 10


class TestImageUrls:
    """Tests for enhance_google_image_url() and process_image_url()"""

    def test_place_image_upgraded_to_1200(self):
        url = "https://lh5.googleusercontent.com/p/AF1QipN=w408-h306-k-no"
        assert enhance_google_image_url(url) == "https://lh5.googleusercontent.com/p/AF1QipN=w1200-h630-p-k-no"

    def test_place_image_square_size(self):
        url = "https://lh3.googleusercontent.com/abc=s120"
        assert enhance_google_image_url(url) == "https://lh3.googleusercontent.com/abc=s1200"

    def test_non_google_image_untouched(self):
        url = "https://example.com/photo.jpg"
        assert enhance_google_image_url(url) == url

    def test_general_utility_uses_800(self):
        url = "https://lh3.googleusercontent.com/abc=w100-h100-k-no"
        assert process_image_url(url) == "https://lh3.googleusercontent.com/abc=w800-h600"

    def test_general_utility_square_size(self):
        assert process_image_url("https://lh3.googleusercontent.com/abc=s96") == "https://lh3.googleusercontent.com/abc=s800"

    def test_protocol_relative(self):
        assert process_image_url("//example.com/a.jpg") == "https://example.com/a.jpg"

    def test_static_map_gets_size_and_zoom(self):
        url = "https://maps.googleapis.com/maps/api/staticmap?center=40.7,-73.9"
        result = process_image_url(url)
        assert "size=800x600" in result
        assert "zoom=15" in result
        assert "center=40.7,-73.9" in result

    def test_static_map_keeps_existing_size(self):
        url = "https://maps.googleapis.com/maps/api/staticmap?center=1,2&size=400x400&zoom=12"
        result = process_image_url(url)
        assert "size=400x400" in result
        assert "zoom=12" in result
        assert "800x600" not in result

    def test_empty(self):
        assert process_image_url(None) is None
        assert process_image_url("") is None


class TestTruncateText:
    """Tests for truncate_text()"""

    def test_short_text_unchanged(self):
        assert truncate_text("Hello World", 100) == ("Hello World", False)

    def test_truncates_at_word_boundary(self):
        text, truncated = truncate_text("This is a very long title that exceeds the limit", 20)
        assert truncated is True
        assert text == "This is a very..."
        assert len(text) <= 20

    def test_single_long_word(self):
        text, truncated = truncate_text("a" * 150, 100)
        assert truncated is True
        assert len(text) == 100
        assert text.endswith("...")

    def test_collapses_whitespace(self):
        assert truncate_text("  Hello \n  World  ", 100) == ("Hello World", False)

    def test_empty(self):
        assert truncate_text(None, 100) == ("", False)


class TestIsValidAbsoluteUrl:
    """Tests for is_valid_absolute_url()"""

    def test_https(self):
        assert is_valid_absolute_url("https://example.com/page")

    def test_no_scheme(self):
        assert not is_valid_absolute_url("example.com/page")

    def test_not_a_url(self):
        assert not is_valid_absolute_url("not-a-valid-url")

    def test_ftp_rejected(self):
        assert not is_valid_absolute_url("ftp://example.com/file")

    def test_non_string(self):
        assert not is_valid_absolute_url(None)
        assert not is_valid_absolute_url(42)


class TestBuildSuggestion:
    """Tests for build_suggestion()"""

    def test_all_fields_missing_still_valid(self):
        suggestion = build_suggestion(
            url="https://example.com",
            title=None,
            location_sentinel="See link for details",
            title_fallback="Web Activity",
        )
        assert suggestion['title'] == "Web Activity"
        assert suggestion['category'] in CATEGORIES
        assert suggestion['location'] == "See link for details"
        assert suggestion['excitement'] == 0
        assert suggestion['estimated_cost'] >= 0
        assert suggestion['duration'] >= 0
        assert suggestion['image_url'] is None
        assert '_metadata' not in suggestion

    def test_price_range_applied(self):
        suggestion = build_suggestion(
            url="https://www.yelp.com/biz/x",
            title="Le Bernardin",
            location_sentinel="See Yelp link",
            title_fallback="Yelp Business",
            category="Food & Dining",
            price_range="$$$",
        )
        assert suggestion['estimated_cost'] == 60
        assert suggestion['duration'] == 90

    def test_unknown_category_is_inferred(self):
        suggestion = build_suggestion(
            url="https://example.com",
            title="City Aquarium",
            location_sentinel="See link for details",
            title_fallback="Web Activity",
            category="Not A Category",
        )
        assert suggestion['category'] == "Outdoor"

    def test_metadata_attached(self):
        suggestion = build_suggestion(
            url="https://example.com",
            title="x",
            location_sentinel="s",
            title_fallback="f",
            metadata={'provider': 'generic'},
        )
        assert suggestion['_metadata'] == {'provider': 'generic'}


class TestBuildManualInputSuggestion:
    """Tests for build_manual_input_suggestion()"""

    def test_shape(self):
        suggestion = build_manual_input_suggestion(
            url="https://www.instagram.com/p/ABC123/",
            title="Instagram post",
            description="Add details",
            location="See Instagram link",
            source="Instagram",
        )
        assert suggestion['manual_input_required'] is True
        assert suggestion['source'] == "Instagram"
        assert suggestion['image_url'] is None
        assert suggestion['category'] == "Entertainment"
        assert suggestion['excitement'] == 0
