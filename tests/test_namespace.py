import pytest

from clj_sculptor.namespace import normalize_namespace


@pytest.fixture
def normalized(read_form):
    def _normalized(text):
        return normalize_namespace(read_form(text)).to_string()

    return _normalized


def test_require_before_import(normalized):
    result = normalized("(ns a (:import (java.util Date)) (:require b))")
    assert result.index(":require") < result.index(":import")


def test_generic_clauses_come_first_in_original_order(normalized):
    result = normalized("(ns a (:require b) (:gen-class) (:refer-clojure :exclude [map]))")
    assert result.index(":gen-class") < result.index(":refer-clojure") < result.index(":require")


def test_name_and_docstring_keep_their_place(normalized):
    result = normalized('(ns a "doc" {:author "me"} (:require b))')
    assert result.startswith('(ns a "doc" {:author "me"}')


def test_require_entries_become_sorted_vectors(normalized):
    assert normalized("(ns a (:require c (b :as bee) [a.x]))") == "(ns a (:require [a.x] [b :as bee] [c]))"


def test_prefix_lists_and_flags_stay(normalized):
    result = normalized("(ns a (:require (clojure string set) :reload))")
    assert "(clojure string set)" in result
    assert ":reload" in result


def test_import_entries_become_package_lists(normalized):
    assert normalized("(ns a (:import [java.io File] java.util.Date))") == (
        "(ns a (:import (java.io File) (java.util Date)))"
    )


def test_bare_import_sorts_by_package(normalized):
    assert normalized("(ns a (:import java.util.Date (java.io File) Foo))") == (
        "(ns a (:import (java.io File) (java.util Date) Foo))"
    )


def test_comment_travels_with_following_entry(normalized):
    result = normalized("(ns a (:require\n ;; zed\n z\n a))")
    assert result.index("[a]") < result.index(";; zed") < result.index("[z]")


def test_comment_travels_with_following_clause(normalized):
    result = normalized("(ns a\n (:import x.Y)\n ;; deps\n (:require b))")
    assert result.index(";; deps") < result.index(":require") < result.index(":import")


def test_non_namespace_lists_are_untouched(read_form):
    node = read_form("(foo (:import [x]))")
    assert normalize_namespace(node) is node
