import pytest
from pymongo import ASCENDING, DESCENDING

from pygoose_paginate import Document
from pygoose_paginate.core.queryset import QuerySet, normalize_projection, normalize_sort


class Article(Document):
    title: str = ""
    category: str = ""
    views: int = 0

    class Settings:
        collection = "qs_articles"


class TestNormalizeSort:
    def test_string(self):
        assert normalize_sort("-views title") == [("views", DESCENDING), ("title", ASCENDING)]

    def test_mapping(self):
        assert normalize_sort({"views": -1, "title": "asc"}) == [
            ("views", DESCENDING),
            ("title", ASCENDING),
        ]

    def test_pairs(self):
        assert normalize_sort([("views", "desc")]) == [("views", DESCENDING)]

    def test_none(self):
        assert normalize_sort(None) == []

    def test_bad_direction(self):
        with pytest.raises(ValueError, match="Invalid sort direction"):
            normalize_sort({"views": "sideways"})


class TestNormalizeProjection:
    def test_string(self):
        assert normalize_projection("title -views") == {"title": 1, "views": 0}

    def test_sequence(self):
        assert normalize_projection(["title", "category"]) == {"title": 1, "category": 1}

    def test_mapping_passes_through(self):
        assert normalize_projection({"title": 1}) == {"title": 1}

    def test_none(self):
        assert normalize_projection(None) is None


class TestBuilder:
    def test_immutability(self):
        qs1 = Article.find(category="tech")
        qs2 = qs1.sort("-views")
        qs3 = qs2.limit(5).lean()

        assert qs1 is not qs2
        assert qs2 is not qs3
        assert qs1._sort == []
        assert qs2._limit_count == 0
        assert qs3._limit_count == 5
        assert qs2._lean is False
        assert qs3._lean is True

    def test_populate_accumulates_in_order(self):
        qs = Article.find().populate("author").populate({"path": "editor"})
        assert qs._populate_specs == ["author", {"path": "editor"}]

    def test_find_merges_kwargs(self):
        qs = Article.find({"category": "tech"}, views=3)
        assert isinstance(qs, QuerySet)
        assert qs._filter == {"category": "tech", "views": 3}


class TestExecution:
    async def test_exec_returns_documents(self, mongo_connection):
        await Article.create(title="A1", category="tech", views=10)
        await Article.create(title="A2", category="science", views=20)
        articles = await Article.find().exec()
        assert len(articles) == 2
        assert all(isinstance(a, Article) for a in articles)

    async def test_lean_returns_dicts(self, mongo_connection):
        await Article.create(title="A1", category="tech")
        docs = await Article.find().lean().exec()
        assert isinstance(docs[0], dict)
        assert docs[0]["title"] == "A1"
        assert "id" not in docs[0]

    async def test_count_ignores_skip_and_limit(self, mongo_connection):
        for i in range(5):
            await Article.create(title=f"Art{i}", category="tech")
        await Article.create(title="Other", category="science")
        assert await Article.find(category="tech").skip(2).limit(1).count() == 4
        assert await Article.count({"category": "tech"}) == 4

    async def test_sort_skip_limit(self, mongo_connection):
        for i in range(5):
            await Article.create(title=f"Art{i}", views=i)
        results = await Article.find().sort({"views": -1}).skip(1).limit(2).exec()
        assert [r.views for r in results] == [3, 2]

    async def test_select_projection(self, mongo_connection):
        await Article.create(title="Projected", category="tech", views=42)
        docs = await Article.find().select("title").lean().exec()
        assert set(docs[0]) == {"_id", "title"}
