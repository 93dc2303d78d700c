"""Shared fixtures for the formatter tests."""

import pytest

from clj_sculptor import Renderer, parse_string


SAMPLE_SOURCE = '''(ns demo.core
  "Demo namespace."
  (:import [java.util Date UUID])
  ;; string helpers
  (:require clojure.string
            (clojure.set :as set)))

; counters
(def counter (atom 0))

(defn- bump
  "Increment the counter."
  [n]
  (swap! counter + n)) ; side effect

(defn area
  ([w] (area w w))
  ([w h] (* w h)))

(let [a 1 ;; first
      b 2]
  (when (pos? a)
    (println a b)))

(cond
  (zero? @counter) :empty
  ;; the common case
  :else :full)

{:name "demo" :tags #{:a :b} :fn #(inc %)}

#_(unused form)
(comment
  (bump 1))
'''


@pytest.fixture
def renderer():
    return Renderer()


@pytest.fixture
def read_form():
    def _read(text):
        forms = parse_string(text)
        return next(child for child in forms.children if child.to_string().strip())

    return _read


@pytest.fixture
def sample_source():
    return SAMPLE_SOURCE
