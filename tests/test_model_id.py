"""Tests for model ids, queries and their string form."""

from datetime import datetime, timezone

import pytest

from polyglot_nlu.models.model_id import Model, ModelIdService, Specifications

SPECS = Specifications(engine_version="1.0.0", classifier="clf", vector_dim=8)


class TestModelIdService:

    def test_specification_hash_is_stable(self):
        service = ModelIdService()
        same = Specifications(engine_version="1.0.0", classifier="clf", vector_dim=8)
        other = Specifications(engine_version="1.0.0", classifier="clf", vector_dim=16)
        assert service.compute_specification_hash(SPECS) == service.compute_specification_hash(same)
        assert service.compute_specification_hash(SPECS) != service.compute_specification_hash(other)

    def test_content_changes_the_id(self):
        service = ModelIdService()
        assert service.compute_id("a", SPECS, "en") != service.compute_id("b", SPECS, "en")

    def test_string_round_trip(self):
        service = ModelIdService()
        model_id = service.compute_id("content", SPECS, "en")
        value = service.to_string(model_id)
        assert value.endswith(".en")
        assert service.from_string(value) == model_id

    @pytest.mark.parametrize("value", ["", "a.b", "a.b.c.d", "a..en"])
    def test_invalid_strings(self, value):
        with pytest.raises(ValueError):
            ModelIdService().from_string(value)

    def test_brief_query_matches(self):
        service = ModelIdService()
        model_id = service.compute_id("content", SPECS, "en")
        assert service.matches(model_id, service.brief_query(SPECS, "en"))
        assert not service.matches(model_id, service.brief_query(SPECS, "fr"))
        other = Specifications(engine_version="2.0.0", classifier="clf", vector_dim=8)
        assert not service.matches(model_id, service.brief_query(other, "en"))


class TestModel:

    def test_dict_round_trip(self):
        model = Model(
            model_id=ModelIdService().compute_id("c", SPECS, "en"),
            content="c",
            created_on=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
        )
        assert Model.from_dict(model.to_dict()) == model
