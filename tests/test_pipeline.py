"""
Unit tests for clubs.pipeline.
"""
from clubs import pipeline
from clubs.models import Activity, AppState, store_from_json


def names(entries):
    return [name for name, _ in entries]


class TestCategories:
    """Test category extraction."""

    def test_first_seen_order(self, school_store):
        """Should list categories in store order, not sorted."""
        assert pipeline.categories(school_store) == ["Games", "Art"]

    def test_skips_missing_and_empty(self):
        """Entries without a category, or with an empty one, add nothing."""
        store = store_from_json({
            "A": {"category": ""},
            "B": {},
            "C": {"category": "Sports"},
        })
        assert pipeline.categories(store) == ["Sports"]

    def test_options_start_with_all(self, school_store):
        """The first option is the empty 'All Categories' sentinel."""
        options = pipeline.category_options(school_store)
        assert options[0] == ("", "All Categories")
        assert options[1:] == [("Games", "Games"), ("Art", "Art")]


class TestFilter:
    """Test the category and search filters."""

    def test_no_filters_keeps_store_order(self, school_store):
        assert names(pipeline.filter_activities(school_store)) == [
            "Chess Club", "Art Studio", "Programming Class", "Board Games"]

    def test_category_is_exact(self, school_store):
        """Only entries with that exact category; uncategorised ones drop out."""
        result = pipeline.filter_activities(school_store, category="Games")
        assert names(result) == ["Chess Club", "Board Games"]
        assert all(a.category == "Games" for _, a in result)

    def test_category_is_case_sensitive(self, school_store):
        assert pipeline.filter_activities(school_store, category="games") == []

    def test_search_matches_name(self, school_store):
        assert names(pipeline.filter_activities(school_store, search="chess")) == ["Chess Club"]

    def test_search_matches_description(self, school_store):
        result = pipeline.filter_activities(school_store, search="SCULPTURE")
        assert names(result) == ["Art Studio"]

    def test_search_is_trimmed(self, school_store):
        assert names(pipeline.filter_activities(school_store, search="  catan  ")) == ["Board Games"]

    def test_search_without_description_uses_name(self):
        store = store_from_json({"Drama": {"schedule": "Fri"}, "Debate": {"description": "drama-free"}})
        assert names(pipeline.filter_activities(store, search="drama")) == ["Drama", "Debate"]

    def test_category_and_search_combine(self, school_store):
        result = pipeline.filter_activities(school_store, category="Games", search="learn")
        assert names(result) == ["Chess Club"]

    def test_no_match(self, school_store):
        assert pipeline.filter_activities(school_store, search="music") == []

    def test_result_is_subset(self, school_store):
        """Every returned pair is the store's own entry."""
        for name, activity in pipeline.filter_activities(school_store, search="a", sort="name"):
            assert school_store[name] is activity


class TestSort:
    """Test the sort modes."""

    def test_sort_by_name(self, school_store):
        result = pipeline.filter_activities(school_store, sort="name")
        assert names(result) == ["Art Studio", "Board Games", "Chess Club", "Programming Class"]

    def test_sort_by_name_ignores_case(self):
        store = store_from_json({"banana": {}, "Apple": {}, "cherry": {}})
        assert names(pipeline.filter_activities(store, sort="name")) == ["Apple", "banana", "cherry"]

    def test_sort_by_name_accents_and_case(self):
        store = store_from_json({"Zumba": {}, "Éclair": {}, "apple": {}, "Apple": {}})
        assert names(pipeline.filter_activities(store, sort="name")) == ["apple", "Apple", "Éclair", "Zumba"]

    def test_sort_by_time_accented_schedule(self):
        store = store_from_json({
            "B": {"schedule": "Vendredi"},
            "A": {"schedule": "Été"},
            "C": {"schedule": "Lundi"},
        })
        assert names(pipeline.filter_activities(store, sort="time")) == ["A", "C", "B"]

    def test_sort_by_time(self, school_store):
        result = pipeline.filter_activities(school_store, sort="time")
        schedules = [a.schedule for _, a in result]
        assert schedules == sorted(schedules, key=pipeline.collation_key)
        assert names(result)[0] == "Chess Club"  # "Fridays" sorts first

    def test_sort_by_time_keeps_unscheduled_in_place(self):
        store = store_from_json({
            "C": {"schedule": "Wed"},
            "Unscheduled": {},
            "A": {"schedule": "Mon"},
            "B": {"schedule": "Tue"},
        })
        assert names(pipeline.filter_activities(store, sort="time")) == ["A", "Unscheduled", "B", "C"]

    def test_unknown_sort_keeps_order(self, school_store):
        assert names(pipeline.filter_activities(school_store, sort="popularity")) == \
            names(pipeline.filter_activities(school_store))

    def test_sort_is_stable(self):
        store = {
            "x": Activity(name="Same", schedule="Mon"),
            "y": Activity(name="Same", schedule="Mon"),
        }
        assert names(pipeline.sort_entries(list(store.items()), "time")) == ["x", "y"]


class TestApply:
    """Test running the pipeline from an AppState."""

    def test_uses_state_filters(self, school_store):
        state = AppState(store=school_store, category="Games", sort="name")
        assert names(pipeline.apply(state)) == ["Board Games", "Chess Club"]

    def test_idempotent(self, school_store):
        state = AppState(store=school_store, search="e", sort="time")
        assert pipeline.apply(state) == pipeline.apply(state)

    def test_does_not_touch_store(self, school_store):
        before = list(school_store)
        pipeline.filter_activities(school_store, sort="name")
        assert list(school_store) == before
