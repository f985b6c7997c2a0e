"""Tests for the in-memory and file-backed model stores."""

from datetime import datetime, timedelta, timezone

import pytest

from polyglot_nlu.data.model_store import FileModelStore, InMemoryModelStore
from polyglot_nlu.errors import ModelNotFound
from polyglot_nlu.models.model_id import Model, ModelIdService, Specifications

SPECS = Specifications(engine_version="1.0.0", classifier="fake", vector_dim=4)
OTHER_SPECS = Specifications(engine_version="2.0.0", classifier="fake", vector_dim=4)
ID_SERVICE = ModelIdService()
T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _model(content, lang="en", specs=SPECS, created_on=T0):
    return Model(
        model_id=ID_SERVICE.compute_id(content, specs, lang),
        content=content,
        created_on=created_on,
    )


class TestInMemoryModelStore:

    @pytest.mark.asyncio
    async def test_get_model_by_id(self):
        store = InMemoryModelStore(ID_SERVICE)
        model = _model("a")
        await store.save_model(model)
        assert await store.get_model(model.model_id) is model

    @pytest.mark.asyncio
    async def test_get_unknown_model_raises(self):
        with pytest.raises(ModelNotFound):
            await InMemoryModelStore(ID_SERVICE).get_model(_model("a").model_id)

    @pytest.mark.asyncio
    async def test_latest_is_most_recently_created(self):
        store = InMemoryModelStore(ID_SERVICE)
        newest = _model("new", created_on=T0 + timedelta(days=1))
        await store.save_model(newest)
        await store.save_model(_model("old"))

        latest = await store.get_latest_model(ID_SERVICE.brief_query(SPECS, "en"))
        assert latest is newest

    @pytest.mark.asyncio
    async def test_equal_timestamps_prefer_last_saved(self):
        store = InMemoryModelStore(ID_SERVICE)
        await store.save_model(_model("first"))
        second = _model("second")
        await store.save_model(second)

        assert await store.get_latest_model(ID_SERVICE.brief_query(SPECS, "en")) is second

    @pytest.mark.asyncio
    async def test_latest_filters_language_and_specifications(self):
        store = InMemoryModelStore(ID_SERVICE)
        await store.save_model(_model("fr", lang="fr", created_on=T0 + timedelta(days=2)))
        await store.save_model(_model("v2", specs=OTHER_SPECS, created_on=T0 + timedelta(days=2)))
        en = _model("en")
        await store.save_model(en)

        assert await store.get_latest_model(ID_SERVICE.brief_query(SPECS, "en")) is en
        with pytest.raises(ModelNotFound):
            await store.get_latest_model(ID_SERVICE.brief_query(SPECS, "de"))

    @pytest.mark.asyncio
    async def test_list_models(self):
        store = InMemoryModelStore(ID_SERVICE)
        await store.save_model(_model("a"))
        await store.save_model(_model("b", lang="fr"))

        assert len(await store.list_models()) == 2
        fr_ids = await store.list_models(ID_SERVICE.brief_query(SPECS, "fr"))
        assert [m.language_code for m in fr_ids] == ["fr"]


class TestFileModelStore:

    @pytest.mark.asyncio
    async def test_round_trip(self, tmp_path):
        store = FileModelStore(str(tmp_path), ID_SERVICE)
        model = _model("payload")
        await store.save_model(model)

        restored = await store.get_model(model.model_id)
        assert restored == model
        assert (tmp_path / f"{ID_SERVICE.to_string(model.model_id)}.model.json").exists()

    @pytest.mark.asyncio
    async def test_get_unknown_model_raises(self, tmp_path):
        with pytest.raises(ModelNotFound):
            await FileModelStore(str(tmp_path), ID_SERVICE).get_model(_model("a").model_id)

    @pytest.mark.asyncio
    async def test_latest_model(self, tmp_path):
        store = FileModelStore(str(tmp_path), ID_SERVICE)
        newest = _model("new", created_on=T0 + timedelta(hours=1))
        await store.save_model(newest)
        await store.save_model(_model("old"))
        await store.save_model(_model("fr", lang="fr", created_on=T0 + timedelta(days=1)))

        latest = await store.get_latest_model(ID_SERVICE.brief_query(SPECS, "en"))
        assert latest.model_id == newest.model_id

    @pytest.mark.asyncio
    async def test_empty_directory_has_no_latest(self, tmp_path):
        store = FileModelStore(str(tmp_path / "models"), ID_SERVICE)
        with pytest.raises(ModelNotFound):
            await store.get_latest_model(ID_SERVICE.brief_query(SPECS, "en"))

    @pytest.mark.asyncio
    async def test_unrecognized_files_are_ignored(self, tmp_path, caplog):
        store = FileModelStore(str(tmp_path), ID_SERVICE)
        (tmp_path / "notes.model.json").write_text("{}")
        await store.save_model(_model("a"))

        assert len(await store.list_models()) == 1
        assert "unrecognized" in caplog.text
