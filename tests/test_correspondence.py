import json

import numpy as np

from meshtidy.controller.correspondence import (
    decode_vertex_records, encode_vertex_records, match_by_uv
)
from meshtidy.model.attributes import VertexRecord
from meshtidy.model.results import ErrorKind, Failure, Success


def _records(rows):
    return [VertexRecord(position=p, uv=uv, normal=n) for p, uv, n in rows]


def test_permuted_candidates_are_matched_by_uv(square_records):
    target = _records(square_records)
    # candidate positions are moved so that a transplant is visible
    moved = [((x + 10.0, y, z), uv, n) for (x, y, z), uv, n in square_records]
    candidates = _records([moved[i] for i in [2, 0, 3, 1]])

    result = match_by_uv(target, candidates)

    assert isinstance(result, Success)
    report = result.value.report
    assert report.matched == 4
    assert report.unmatched == []
    assert report.correspondence == {0: 1, 1: 3, 2: 0, 3: 2}
    for i, record in enumerate(result.value.records):
        j = report.correspondence[i]
        assert np.array_equal(record.position, candidates[j].position)
        assert np.array_equal(record.uv, target[i].uv)


def test_round_trip_of_a_permutation_recovers_every_position():
    rng = np.random.default_rng(7)
    positions = rng.normal(size=(20, 3))
    uvs = rng.uniform(size=(20, 2))
    target = [VertexRecord(np.zeros(3), uv) for uv in uvs]
    order = rng.permutation(20)
    candidates = [VertexRecord(positions[k], uvs[k]) for k in order]

    transplant = match_by_uv(target, candidates).value

    assert transplant.report.unmatched == []
    assert np.allclose([r.position for r in transplant.records], positions)


def test_count_mismatch_fails_before_matching(square_records):
    result = match_by_uv(_records(square_records), _records(square_records[:3]))
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.SIZE_MISMATCH
    assert "Was: 3, Expected: 4" in result.message


def test_unmatched_vertices_keep_their_positions(square_records):
    target = _records(square_records)
    candidates = _records(square_records)
    candidates[3] = VertexRecord(position=(9.0, 9.0, 9.0), uv=(0.5, 0.5))

    report = match_by_uv(target, candidates).value.report

    assert report.matched == 3
    assert report.unmatched_indices == [3]
    assert report.unmatched[0].position == (1.0, 1.0, 0.0)
    assert report.summary() == "Modified 3 out of 4 vertices."


def test_consumed_candidates_are_not_reused():
    target = _records([((0, 0, 0), (0.5, 0.5), None), ((0, 0, 0), (0.5, 0.5), None)])
    candidates = _records([((1, 0, 0), (0.5, 0.5), None), ((2, 0, 0), (0.5, 0.5), None)])

    transplant = match_by_uv(target, candidates).value

    assert [r.position[0] for r in transplant.records] == [1.0, 2.0]


def test_tolerance_is_strict_and_absolute():
    target = _records([((0, 0, 0), (0.5, 0.5), None)])
    near = _records([((1, 0, 0), (0.5 + 5e-6, 0.5 - 5e-6), None)])
    far = _records([((1, 0, 0), (0.5 + 2e-5, 0.5), None)])

    assert match_by_uv(target, near).value.report.matched == 1
    assert match_by_uv(target, far).value.report.matched == 0


def test_normals_are_transplanted_when_both_sides_have_them():
    target = _records([((0, 0, 0), (0.1, 0.2), (0.0, 0.0, 1.0))])
    candidates = _records([((3, 2, 1), (0.1, 0.2), (1.0, 0.0, 0.0))])

    record = match_by_uv(target, candidates).value.records[0]

    assert record.normal.tolist() == [1.0, 0.0, 0.0]


def test_encoded_text_is_a_json_array_of_records(square_records):
    records = _records(square_records)
    records[0].normal = np.array([0.0, 0.0, 1.0])

    text = encode_vertex_records(records)
    data = json.loads(text)

    assert len(data) == 4
    assert data[0] == {"vertex": [0.0, 0.0, 0.0], "normal": [0.0, 0.0, 1.0], "uv": [0.0, 0.0]}
    assert "normal" not in data[1]

    decoded = decode_vertex_records(text).value
    assert [r.uv.tolist() for r in decoded] == [list(uv) for _, uv, _ in square_records]


def test_decoding_rejects_malformed_payloads():
    assert decode_vertex_records("not json").kind == ErrorKind.INVALID_PAYLOAD
    assert decode_vertex_records('{"vertex": [0, 0, 0]}').kind == ErrorKind.INVALID_PAYLOAD
    assert decode_vertex_records('[{"vertex": [0, 0], "uv": [0, 0]}]').kind == ErrorKind.INVALID_PAYLOAD
    assert decode_vertex_records('[{"uv": [0, 0]}]').kind == ErrorKind.INVALID_PAYLOAD
