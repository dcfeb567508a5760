import pytest
from editk.align.alignment import Alignment, EditOp
from editk.align.distance import edit_distance


class TestAlignment:
    def test_fields(self):
        aln = Alignment(3, 'ab_cd', 'axy_d', 'a___d')
        assert aln.edit_distance == 3
        assert aln.gap == '_'
        assert len(aln) == 5

    def test_unequal_lengths(self):
        with pytest.raises(ValueError, match="same length"):
            Alignment(1, 'ab', 'a', 'a')

    def test_immutable(self):
        aln = Alignment(0, 'a', 'a', 'a')
        with pytest.raises(AttributeError, match="immutable"):
            aln.edit_distance = 5

    def test_equality_and_hash(self):
        first = Alignment(2, 'TGCA', 'TCTA', 'T__A')
        second = Alignment(2, 'TGCA', 'TCTA', 'T__A')
        assert first == second
        assert hash(first) == hash(second)
        assert first != Alignment(2, 'TGCA', 'TCTA', 'T__A', gap='-')
        assert first != 'TGCA'

    def test_recovers_inputs(self):
        aln = Alignment(2, 'TGC_A', 'T_CTA', 'T_C_A')
        assert aln.a == 'TGCA'
        assert aln.b == 'TCTA'

    def test_str(self):
        assert str(Alignment(2, 'TGCA', 'TCTA', 'T__A')) == 'TGCA\nTCTA\nT__A'

    def test_identity(self):
        aln = Alignment(3, 'ab_cd', 'axy_d', 'a___d')
        assert aln.n_matches == 2
        assert aln.identity() == pytest.approx(0.4)
        assert Alignment(0, '', '', '').identity() == 0.0

    def test_flip(self):
        aln = Alignment(3, 'ab_cd', 'axy_d', 'a___d').flip()
        assert aln.aligned_a == 'axy_d'
        assert aln.aligned_b == 'ab_cd'
        assert aln.recount() == 3


class TestOperations:
    def test_edit_script(self):
        aln = Alignment(3, 'ab_cd', 'axy_d', 'a___d')
        assert list(aln.operations()) == [
            (EditOp.KEEP, 'a', 'a'),
            (EditOp.SUBSTITUTE, 'b', 'x'),
            (EditOp.INSERT, '_', 'y'),
            (EditOp.DELETE, 'c', '_'),
            (EditOp.KEEP, 'd', 'd'),
        ]

    def test_recount(self):
        assert Alignment(3, 'ab_cd', 'axy_d', 'a___d').recount() == 3
        assert Alignment(0, 'abc', 'abc', 'abc').recount() == 0
        assert Alignment(0, '', '', '').recount() == 0

    def test_custom_gap(self):
        aln = Alignment(2, 'a-b', 'ac-', 'a--', gap='-')
        assert [op for op, _, _ in aln.operations()] == [EditOp.KEEP, EditOp.INSERT, EditOp.DELETE]


class TestEditDistance:
    def test_classic(self):
        assert edit_distance('kitten', 'sitting') == 3
        assert edit_distance('flaw', 'lawn') == 2

    def test_empty(self):
        assert edit_distance('', '') == 0
        assert edit_distance('', 'abc') == 3
        assert edit_distance('abcd', '') == 4

    def test_symmetric(self):
        assert edit_distance('TGCA', 'TCTA') == edit_distance('TCTA', 'TGCA') == 2
