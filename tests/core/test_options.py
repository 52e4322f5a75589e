import pytest

from pygoose_paginate.core.options import DEFAULT_LIMIT, PageOptions


class TestCoerce:
    def test_none_is_empty(self):
        assert PageOptions.coerce(None) == PageOptions()

    def test_mapping(self):
        assert PageOptions.coerce({"limit": 5}).limit == 5

    def test_instance_passes_through(self):
        opts = PageOptions(page=2)
        assert PageOptions.coerce(opts) is opts

    def test_unknown_key(self):
        with pytest.raises(TypeError):
            PageOptions.coerce({"leanWithId": False})


class TestMerge:
    def test_set_keys_override(self):
        merged = PageOptions(limit=5).merged_over(PageOptions(limit=20, lean=True))
        assert merged.limit == 5
        assert merged.lean is True

    def test_false_and_zero_are_set(self):
        merged = PageOptions(lean=False, limit=0).merged_over(PageOptions(limit=20, lean=True))
        assert merged.lean is False
        assert merged.limit == 0


class TestResolve:
    def test_builtin_defaults(self):
        plan = PageOptions().resolve()
        assert plan.limit == DEFAULT_LIMIT == 10
        assert plan.lean is False
        assert plan.lean_with_id is True
        assert plan.populate == []
        assert (plan.page, plan.offset, plan.skip) == (1, None, 0)

    def test_page_mode(self):
        plan = PageOptions(page=4, limit=25).resolve()
        assert (plan.page, plan.offset, plan.skip) == (4, None, 75)

    def test_offset_mode(self):
        plan = PageOptions(offset=12, page=4).resolve()
        assert (plan.page, plan.offset, plan.skip) == (None, 12, 12)

    def test_populate_single_becomes_list(self):
        assert PageOptions(populate="author").resolve().populate == ["author"]
        spec = {"path": "author", "select": "name"}
        assert PageOptions(populate=spec).resolve().populate == [spec]

    def test_populate_sequence_keeps_order(self):
        plan = PageOptions(populate=("editor", "author")).resolve()
        assert plan.populate == ["editor", "author"]

    def test_paging_shapes(self):
        offset_paging = PageOptions(offset=30, limit=20).resolve().paging(100)
        assert offset_paging.to_dict() == {
            "totalItems": 100,
            "itemsPerPage": 20,
            "currentStartIndex": 30,
        }
        page_paging = PageOptions(page=2, limit=20).resolve().paging(100)
        assert page_paging.to_dict() == {
            "totalItems": 100,
            "itemsPerPage": 20,
            "currentPage": 2,
            "totalPages": 5,
        }
