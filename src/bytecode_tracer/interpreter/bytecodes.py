# bytecode_tracer/interpreter/bytecodes.py
"""
オペコードカタログ

JVMの標準オペコード、デバッガ用のbreakpoint、および実行時に書き換えられる
クイック化（fast_*）オペコードの番号・名前・命令長・対応するJavaオペコードを定義します。
"""
from enum import IntEnum
from typing import Dict, NamedTuple

from bytecode_tracer.transport.method import Method

# @intent:map 全オペコードの番号定義。名前は小文字化したものがニーモニックになります。
class Bytecodes(IntEnum):
    NOP = 0
    ACONST_NULL = 1
    ICONST_M1 = 2
    ICONST_0 = 3
    ICONST_1 = 4
    ICONST_2 = 5
    ICONST_3 = 6
    ICONST_4 = 7
    ICONST_5 = 8
    LCONST_0 = 9
    LCONST_1 = 10
    FCONST_0 = 11
    FCONST_1 = 12
    FCONST_2 = 13
    DCONST_0 = 14
    DCONST_1 = 15
    BIPUSH = 16
    SIPUSH = 17
    LDC = 18
    LDC_W = 19
    LDC2_W = 20
    ILOAD = 21
    LLOAD = 22
    FLOAD = 23
    DLOAD = 24
    ALOAD = 25
    ILOAD_0 = 26
    ILOAD_1 = 27
    ILOAD_2 = 28
    ILOAD_3 = 29
    LLOAD_0 = 30
    LLOAD_1 = 31
    LLOAD_2 = 32
    LLOAD_3 = 33
    FLOAD_0 = 34
    FLOAD_1 = 35
    FLOAD_2 = 36
    FLOAD_3 = 37
    DLOAD_0 = 38
    DLOAD_1 = 39
    DLOAD_2 = 40
    DLOAD_3 = 41
    ALOAD_0 = 42
    ALOAD_1 = 43
    ALOAD_2 = 44
    ALOAD_3 = 45
    IALOAD = 46
    LALOAD = 47
    FALOAD = 48
    DALOAD = 49
    AALOAD = 50
    BALOAD = 51
    CALOAD = 52
    SALOAD = 53
    ISTORE = 54
    LSTORE = 55
    FSTORE = 56
    DSTORE = 57
    ASTORE = 58
    ISTORE_0 = 59
    ISTORE_1 = 60
    ISTORE_2 = 61
    ISTORE_3 = 62
    LSTORE_0 = 63
    LSTORE_1 = 64
    LSTORE_2 = 65
    LSTORE_3 = 66
    FSTORE_0 = 67
    FSTORE_1 = 68
    FSTORE_2 = 69
    FSTORE_3 = 70
    DSTORE_0 = 71
    DSTORE_1 = 72
    DSTORE_2 = 73
    DSTORE_3 = 74
    ASTORE_0 = 75
    ASTORE_1 = 76
    ASTORE_2 = 77
    ASTORE_3 = 78
    IASTORE = 79
    LASTORE = 80
    FASTORE = 81
    DASTORE = 82
    AASTORE = 83
    BASTORE = 84
    CASTORE = 85
    SASTORE = 86
    POP = 87
    POP2 = 88
    DUP = 89
    DUP_X1 = 90
    DUP_X2 = 91
    DUP2 = 92
    DUP2_X1 = 93
    DUP2_X2 = 94
    SWAP = 95
    IADD = 96
    LADD = 97
    FADD = 98
    DADD = 99
    ISUB = 100
    LSUB = 101
    FSUB = 102
    DSUB = 103
    IMUL = 104
    LMUL = 105
    FMUL = 106
    DMUL = 107
    IDIV = 108
    LDIV = 109
    FDIV = 110
    DDIV = 111
    IREM = 112
    LREM = 113
    FREM = 114
    DREM = 115
    INEG = 116
    LNEG = 117
    FNEG = 118
    DNEG = 119
    ISHL = 120
    LSHL = 121
    ISHR = 122
    LSHR = 123
    IUSHR = 124
    LUSHR = 125
    IAND = 126
    LAND = 127
    IOR = 128
    LOR = 129
    IXOR = 130
    LXOR = 131
    IINC = 132
    I2L = 133
    I2F = 134
    I2D = 135
    L2I = 136
    L2F = 137
    L2D = 138
    F2I = 139
    F2L = 140
    F2D = 141
    D2I = 142
    D2L = 143
    D2F = 144
    I2B = 145
    I2C = 146
    I2S = 147
    LCMP = 148
    FCMPL = 149
    FCMPG = 150
    DCMPL = 151
    DCMPG = 152
    IFEQ = 153
    IFNE = 154
    IFLT = 155
    IFGE = 156
    IFGT = 157
    IFLE = 158
    IF_ICMPEQ = 159
    IF_ICMPNE = 160
    IF_ICMPLT = 161
    IF_ICMPGE = 162
    IF_ICMPGT = 163
    IF_ICMPLE = 164
    IF_ACMPEQ = 165
    IF_ACMPNE = 166
    GOTO = 167
    JSR = 168
    RET = 169
    TABLESWITCH = 170
    LOOKUPSWITCH = 171
    IRETURN = 172
    LRETURN = 173
    FRETURN = 174
    DRETURN = 175
    ARETURN = 176
    RETURN = 177
    GETSTATIC = 178
    PUTSTATIC = 179
    GETFIELD = 180
    PUTFIELD = 181
    INVOKEVIRTUAL = 182
    INVOKESPECIAL = 183
    INVOKESTATIC = 184
    INVOKEINTERFACE = 185
    INVOKEDYNAMIC = 186
    NEW = 187
    NEWARRAY = 188
    ANEWARRAY = 189
    ARRAYLENGTH = 190
    ATHROW = 191
    CHECKCAST = 192
    INSTANCEOF = 193
    MONITORENTER = 194
    MONITOREXIT = 195
    WIDE = 196
    MULTIANEWARRAY = 197
    IFNULL = 198
    IFNONNULL = 199
    GOTO_W = 200
    JSR_W = 201
    BREAKPOINT = 202

    # 実行時に書き換えられるクイック化オペコード
    FAST_AGETFIELD = 203
    FAST_BGETFIELD = 204
    FAST_CGETFIELD = 205
    FAST_DGETFIELD = 206
    FAST_FGETFIELD = 207
    FAST_IGETFIELD = 208
    FAST_LGETFIELD = 209
    FAST_SGETFIELD = 210
    FAST_APUTFIELD = 211
    FAST_BPUTFIELD = 212
    FAST_CPUTFIELD = 213
    FAST_DPUTFIELD = 214
    FAST_FPUTFIELD = 215
    FAST_IPUTFIELD = 216
    FAST_LPUTFIELD = 217
    FAST_SPUTFIELD = 218
    FAST_ALOAD_0 = 219
    FAST_IACCESS_0 = 220
    FAST_AACCESS_0 = 221
    FAST_FACCESS_0 = 222
    FAST_ILOAD = 223
    FAST_ILOAD2 = 224
    FAST_ICALOAD = 225
    FAST_INVOKEVFINAL = 226
    FAST_LINEARSWITCH = 227
    FAST_BINARYSWITCH = 228
    RETURN_REGISTER_FINALIZER = 229
    SHOULDNOTREACHHERE = 230

# @intent:data_structure 1オペコード分のカタログ情報。length 0 は可変長命令を表します。
class BytecodeInfo(NamedTuple):
    name: str
    length: int
    java_code: int

B = Bytecodes

# 固定長が1でないJava標準オペコードの命令長
_JAVA_LENGTHS: Dict[int, int] = {
    B.BIPUSH: 2, B.SIPUSH: 3, B.LDC: 2, B.LDC_W: 3, B.LDC2_W: 3,
    B.ILOAD: 2, B.LLOAD: 2, B.FLOAD: 2, B.DLOAD: 2, B.ALOAD: 2,
    B.ISTORE: 2, B.LSTORE: 2, B.FSTORE: 2, B.DSTORE: 2, B.ASTORE: 2,
    B.IINC: 3,
    B.IFEQ: 3, B.IFNE: 3, B.IFLT: 3, B.IFGE: 3, B.IFGT: 3, B.IFLE: 3,
    B.IF_ICMPEQ: 3, B.IF_ICMPNE: 3, B.IF_ICMPLT: 3, B.IF_ICMPGE: 3,
    B.IF_ICMPGT: 3, B.IF_ICMPLE: 3, B.IF_ACMPEQ: 3, B.IF_ACMPNE: 3,
    B.GOTO: 3, B.JSR: 3, B.RET: 2,
    B.TABLESWITCH: 0, B.LOOKUPSWITCH: 0,
    B.GETSTATIC: 3, B.PUTSTATIC: 3, B.GETFIELD: 3, B.PUTFIELD: 3,
    B.INVOKEVIRTUAL: 3, B.INVOKESPECIAL: 3, B.INVOKESTATIC: 3,
    B.INVOKEINTERFACE: 5, B.INVOKEDYNAMIC: 5,
    B.NEW: 3, B.NEWARRAY: 2, B.ANEWARRAY: 3,
    B.CHECKCAST: 3, B.INSTANCEOF: 3,
    B.WIDE: 0, B.MULTIANEWARRAY: 4,
    B.IFNULL: 3, B.IFNONNULL: 3, B.GOTO_W: 5, B.JSR_W: 5,
}

# クイック化オペコードの (命令長, 元のJavaオペコード)
_FAST_FORMS: Dict[int, tuple] = {
    B.FAST_AGETFIELD: (3, B.GETFIELD),
    B.FAST_BGETFIELD: (3, B.GETFIELD),
    B.FAST_CGETFIELD: (3, B.GETFIELD),
    B.FAST_DGETFIELD: (3, B.GETFIELD),
    B.FAST_FGETFIELD: (3, B.GETFIELD),
    B.FAST_IGETFIELD: (3, B.GETFIELD),
    B.FAST_LGETFIELD: (3, B.GETFIELD),
    B.FAST_SGETFIELD: (3, B.GETFIELD),
    B.FAST_APUTFIELD: (3, B.PUTFIELD),
    B.FAST_BPUTFIELD: (3, B.PUTFIELD),
    B.FAST_CPUTFIELD: (3, B.PUTFIELD),
    B.FAST_DPUTFIELD: (3, B.PUTFIELD),
    B.FAST_FPUTFIELD: (3, B.PUTFIELD),
    B.FAST_IPUTFIELD: (3, B.PUTFIELD),
    B.FAST_LPUTFIELD: (3, B.PUTFIELD),
    B.FAST_SPUTFIELD: (3, B.PUTFIELD),
    B.FAST_ALOAD_0: (1, B.ALOAD_0),
    B.FAST_IACCESS_0: (4, B.ALOAD_0),
    B.FAST_AACCESS_0: (4, B.ALOAD_0),
    B.FAST_FACCESS_0: (4, B.ALOAD_0),
    B.FAST_ILOAD: (2, B.ILOAD),
    B.FAST_ILOAD2: (4, B.ILOAD),
    B.FAST_ICALOAD: (3, B.ILOAD),
    B.FAST_INVOKEVFINAL: (3, B.INVOKEVIRTUAL),
    B.FAST_LINEARSWITCH: (0, B.LOOKUPSWITCH),
    B.FAST_BINARYSWITCH: (0, B.LOOKUPSWITCH),
    B.RETURN_REGISTER_FINALIZER: (1, B.RETURN),
    B.SHOULDNOTREACHHERE: (1, B.SHOULDNOTREACHHERE),
}

def _build_table() -> Dict[int, BytecodeInfo]:
    table = {}
    for code in Bytecodes:
        if code in _FAST_FORMS:
            length, java = _FAST_FORMS[code]
        else:
            length, java = _JAVA_LENGTHS.get(code, 1), code
        table[int(code)] = BytecodeInfo(code.name.lower(), length, int(java))
    return table

# @intent:map オペコード番号からカタログ情報へのマッピングテーブル。
BYTECODE_TABLE: Dict[int, BytecodeInfo] = _build_table()

# @intent:constant 可変長命令のオペランドを整列させる境界（バイト）。
JINT_SIZE = 4

def is_defined(code: int) -> bool:
    return code in BYTECODE_TABLE

# @intent:responsibility クイック化されていない標準のJavaオペコードかを判定します。
def is_java_code(code: int) -> bool:
    return 0 <= code < B.BREAKPOINT

def _info(code: int) -> BytecodeInfo:
    info = BYTECODE_TABLE.get(code)
    if info is None:
        raise ValueError(f"Undefined bytecode {code:#04x}")
    return info

def name_of(code: int) -> str:
    return _info(code).name

# @intent:responsibility クイック化オペコードから書き換え前のJavaオペコードを求めます。
def java_code(code: int) -> int:
    return _info(code).java_code

def length_for(code: int) -> int:
    """固定長命令の長さを返す。可変長命令は0。"""
    return _info(code).length

# @intent:responsibility bciのオペコードを返します（ブレークポイントは元のオペコードに解決）。
def code_at(method: Method, bci: int) -> int:
    return method.get_bytecode_or_bp_at(bci)

def _align(value: int) -> int:
    return (value + JINT_SIZE - 1) & ~(JINT_SIZE - 1)

# @intent:responsibility 可変長命令も含めて、bciから始まる命令のバイト長を求めます。
# @intent:pre-condition bciは命令の先頭を指している必要があります。
def length_at(method: Method, bci: int) -> int:
    """
    bciにある命令の長さを返します。
    wide、tableswitch、lookupswitch（およびそのクイック化形）は命令バイトを読んで長さを計算します。
    未定義のオペコードはValueErrorになります。
    """
    code = code_at(method, bci)
    length = length_for(code)
    if length != 0:
        return length

    if code == B.WIDE:
        widened = code_at(method, bci + 1)
        # wide iinc は インデックス(2) + 増分(2)、それ以外は インデックス(2)
        return 6 if widened == B.IINC else 4

    aligned = _align(bci + 1)
    if code == B.TABLESWITCH:
        low = method.get_bytecode_int_arg(aligned + 4)
        high = method.get_bytecode_int_arg(aligned + 8)
        if high < low:
            raise ValueError(f"Malformed tableswitch at bci {bci}: low={low} high={high}")
        return aligned + 12 + (high - low + 1) * JINT_SIZE - bci

    # lookupswitch, fast_linearswitch, fast_binaryswitch
    npairs = method.get_bytecode_int_arg(aligned + 4)
    if npairs < 0:
        raise ValueError(f"Malformed lookupswitch at bci {bci}: npairs={npairs}")
    return aligned + 8 + npairs * 2 * JINT_SIZE - bci
