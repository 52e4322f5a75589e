from pygoose_paginate.plugins.paginate import PaginateMixin

__all__ = ["PaginateMixin"]
