from prophyt.schemas.envelope import Failure, PageMeta, Success, fail, ok

__all__ = ["Failure", "PageMeta", "Success", "fail", "ok"]
