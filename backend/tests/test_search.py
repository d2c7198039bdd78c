"""
Search tests: match paths, result ordering, status filter, index annotation.
"""
from conftest import make_fields
from models import Patient, STATUS_APPOINTMENT_SCHEDULED, STATUS_DISCHARGED, STATUS_UNDER_TREATMENT


class TestSearchMatching:
    def test_finds_by_name_substring(self, seeded_store):
        results = seeded_store.search("smith", "")
        assert [r["name"] for r in results] == ["John Smith"]

    def test_case_insensitive(self, seeded_store):
        assert [r["id"] for r in seeded_store.search("SARAH")] == ["P002"]

    def test_finds_by_diagnosis(self, seeded_store):
        results = seeded_store.search("knee")
        assert [r["id"] for r in results] == ["P003"]

    def test_uppercase_ids_not_matched_by_lowered_query(self, seeded_store):
        """Ids are indexed raw, while the query is lowercased"""
        assert seeded_store.search("P001") == []

    def test_lowercase_id_matches(self, store):
        """An id key only matches when it is already lowercase"""
        store._patients.append(Patient(id="x42", name="Zed"))
        assert [r["id"] for r in store.search("x4")] == ["x42"]

    def test_empty_query_matches_all_in_order(self, seeded_store):
        results = seeded_store.search("")
        assert [r["id"] for r in results] == ["P001", "P002", "P003"]

    def test_no_match(self, seeded_store):
        assert seeded_store.search("zzz") == []

    def test_empty_store(self, store):
        assert store.search("") == []
        assert store.search("anything", STATUS_DISCHARGED) == []


class TestSearchOrdering:
    def test_name_hits_grouped_by_key_then_diagnosis(self, store):
        store.add(make_fields("Anna Lee", 30, diagnosis="flu"))
        store.add(make_fields("Bob Annan", 40, diagnosis="cold"))
        store.add(make_fields("Anna Lee", 50, diagnosis="sprain"))
        store.add(make_fields("Carl", 60, diagnosis="Annual checkup"))

        results = store.search("ann")
        assert [r["index"] for r in results] == [0, 2, 1, 3]

    def test_no_duplicates_across_paths(self, store):
        store.add(make_fields("Flu Patient", 30, diagnosis="Flu"))
        results = store.search("flu")
        assert len(results) == 1
        assert results[0]["index"] == 0


class TestStatusFilter:
    def test_status_only(self, seeded_store):
        results = seeded_store.search("", STATUS_DISCHARGED)
        assert [r["id"] for r in results] == ["P002"]
        assert all(r["status"] == STATUS_DISCHARGED for r in results)

    def test_status_is_exact(self, seeded_store):
        assert seeded_store.search("", "discharged") == []

    def test_query_and_status(self, store):
        store.add(make_fields("Ann One", 30, status=STATUS_UNDER_TREATMENT))
        store.add(make_fields("Ann Two", 31, status=STATUS_APPOINTMENT_SCHEDULED))
        results = store.search("ann", STATUS_APPOINTMENT_SCHEDULED)
        assert [r["name"] for r in results] == ["Ann Two"]
        assert results[0]["index"] == 1


class TestIndexAnnotation:
    def test_index_points_into_live_collection(self, seeded_store):
        for hit in seeded_store.search(""):
            assert seeded_store.get(hit["index"]).id == hit["id"]

    def test_index_goes_stale_after_removal(self, seeded_store):
        """An index captured before a removal no longer addresses the same record"""
        hit = seeded_store.search("michael")[0]
        assert hit["index"] == 2
        seeded_store.remove(0)
        assert seeded_store.get(hit["index"]) is None
        assert seeded_store.lookup(hit["id"]) == 1

    def test_results_sortable_by_field(self, seeded_store):
        results = seeded_store.sort_by(seeded_store.search(""), "age", True)
        assert [r["age"] for r in results] == [28, 32, 45]
        assert [r["index"] for r in results] == [2, 1, 0]
