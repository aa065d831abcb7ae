from cortexmem.rrf import rrf_fuse


def test_empty_lists_produce_empty_result():
    assert rrf_fuse([], [], 60) == []


def test_single_list_produces_scores():
    result = rrf_fuse([(1, 0), (2, 1)], [], 60)
    assert len(result) == 2
    assert result[0][1] > result[1][1]


def test_should_fuse_results_with_rrf():
    fts_ranks = [(1, 0), (2, 1), (3, 2)]
    vec_ranks = [(3, 0), (1, 1), (4, 2)]
    fused = rrf_fuse(fts_ranks, vec_ranks, 60)

    assert [item_id for item_id, _ in fused] == [1, 3, 2, 4]


def test_items_in_both_lists_outscore_single_list_items():
    fused = dict(rrf_fuse([(1, 0), (2, 0)], [(1, 0)], 60))
    assert fused[1] > fused[2]


def test_scores_are_descending():
    fused = rrf_fuse([(5, 3), (6, 0), (7, 1)], [(8, 2), (5, 0)], 60)
    scores = [score for _, score in fused]
    assert scores == sorted(scores, reverse=True)


def test_smaller_k_gives_larger_scores():
    small = rrf_fuse([(1, 0)], [], 1)[0][1]
    large = rrf_fuse([(1, 0)], [], 60)[0][1]
    assert small > large