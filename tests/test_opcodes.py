import pytest

from chip8vm.opcodes import OPCODES, Op, decode, disassemble


@pytest.mark.parametrize(
    "word, op",
    [
        (0x00E0, Op.CLS),
        (0x00EE, Op.RET),
        (0x1ABC, Op.JP),
        (0x2ABC, Op.CALL),
        (0x3A12, Op.SE_VX_KK),
        (0x4A12, Op.SNE_VX_KK),
        (0x5AB0, Op.SE_VX_VY),
        (0x6A12, Op.LD_VX_KK),
        (0x7A12, Op.ADD_VX_KK),
        (0x8AB0, Op.LD_VX_VY),
        (0x8AB1, Op.OR),
        (0x8AB2, Op.AND),
        (0x8AB3, Op.XOR),
        (0x8AB4, Op.ADD),
        (0x8AB5, Op.SUB),
        (0x8AB6, Op.SHR),
        (0x8AB7, Op.SUBN),
        (0x8ABE, Op.SHL),
        (0x9AB0, Op.SNE_VX_VY),
        (0xA123, Op.LD_I),
        (0xB123, Op.JP_V0),
        (0xCA12, Op.RND),
        (0xDAB5, Op.DRW),
        (0xEA9E, Op.SKP),
        (0xEAA1, Op.SKNP),
        (0xFA07, Op.LD_VX_DT),
        (0xFA0A, Op.LD_VX_K),
        (0xFA15, Op.LD_DT_VX),
        (0xFA18, Op.LD_ST_VX),
        (0xFA1E, Op.ADD_I_VX),
        (0xFA29, Op.LD_F_VX),
        (0xFA33, Op.LD_B_VX),
        (0xFA55, Op.LD_I_VX),
        (0xFA65, Op.LD_VX_I),
    ],
)
def test_decode_table(word, op):
    assert decode(word).op is op


def test_every_known_op_is_in_the_table():
    assert {op for _, _, op in OPCODES} == set(Op) - {Op.UNKNOWN}


@pytest.mark.parametrize(
    "word",
    [0x0000, 0x0123, 0x00E1, 0x5121, 0x912F, 0x8008, 0x800F, 0xE09F, 0xE000, 0xF000, 0xF0FF],
)
def test_unmatched_words_decode_to_unknown(word):
    assert decode(word).op is Op.UNKNOWN


def test_fields():
    ins = decode(0xD125)
    assert (ins.x, ins.y, ins.n) == (0x1, 0x2, 0x5)
    assert ins.kk == 0x25
    assert ins.nnn == 0x125
    assert ins.word == 0xD125


def test_decode_rejects_out_of_range_words():
    with pytest.raises(ValueError):
        decode(0x10000)
    with pytest.raises(ValueError):
        decode(-1)


@pytest.mark.parametrize(
    "word, text",
    [
        (0x6005, "LD V0, 0x05"),
        (0xD015, "DRW V0, V1, 5"),
        (0x2ABC, "CALL 0xABC"),
        (0xF233, "LD B, V2"),
        (0xFE65, "LD VE, [I]"),
        (0x0123, "DW 0x0123"),
    ],
)
def test_mnemonics(word, text):
    assert str(decode(word)) == text


def test_disassemble_walks_word_pairs():
    listing = list(disassemble(bytes([0x60, 0x05, 0x70, 0x03, 0xFF])))
    assert [(addr, ins.op) for addr, ins in listing] == [
        (0x200, Op.LD_VX_KK),
        (0x202, Op.ADD_VX_KK),
    ]
