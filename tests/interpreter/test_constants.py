import unittest
from bytecode_tracer.transport.method import ByteCodeSource, Method
from bytecode_tracer.interpreter import Bytecodes
from bytecode_tracer.interpreter.constants import (
    BytecodeBipush, BytecodeSipush, BytecodeLoadConstant, BytecodeNew, BytecodeANewArray,
    BytecodeCheckCast, BytecodeInstanceOf, BytecodeMultiANewArray, BytecodeNewArray,
)

def make_method(data):
    return Method(ByteCodeSource(bytes(data)))

class TestConstantInstructions(unittest.TestCase):
    def test_bipush_signed(self):
        b = BytecodeBipush.at_check(make_method([Bytecodes.BIPUSH, 0xFE]), 0)
        self.assertEqual(b.get_value(), -2)
        self.assertEqual(str(b), "bipush -2")

    def test_sipush_signed(self):
        b = BytecodeSipush.at_check(make_method([Bytecodes.SIPUSH, 0x80, 0x00]), 0)
        self.assertEqual(b.get_value(), -32768)
        b = BytecodeSipush.at_check(make_method([Bytecodes.SIPUSH, 0x01, 0x00]), 0)
        self.assertEqual(str(b), "sipush 256")

    def test_ldc_forms(self):
        ldc = BytecodeLoadConstant.at_check(make_method([Bytecodes.LDC, 7]), 0)
        self.assertFalse(ldc.is_wide_index())
        self.assertEqual(str(ldc), "ldc #7")

        ldc_w = BytecodeLoadConstant.at_check(make_method([Bytecodes.LDC_W, 0x01, 0x00]), 0)
        self.assertTrue(ldc_w.is_wide_index())
        self.assertEqual(str(ldc_w), "ldc_w #256")

        ldc2_w = BytecodeLoadConstant.at_check(make_method([Bytecodes.LDC2_W, 0x00, 0x09]), 0)
        self.assertEqual(ldc2_w.pool_index(), 9)

    def test_klass_instructions(self):
        cases = [
            (BytecodeNew, Bytecodes.NEW, "new #5"),
            (BytecodeANewArray, Bytecodes.ANEWARRAY, "anewarray #5"),
            (BytecodeCheckCast, Bytecodes.CHECKCAST, "checkcast #5"),
            (BytecodeInstanceOf, Bytecodes.INSTANCEOF, "instanceof #5"),
        ]
        for variant, code, text in cases:
            b = variant.at_check(make_method([code, 0x00, 0x05]), 0)
            self.assertEqual(b.get_klass_index(), 5)
            self.assertEqual(str(b), text)

        self.assertIsNone(BytecodeCheckCast.at_check(make_method([Bytecodes.NEW, 0x00, 0x05]), 0))

    def test_multianewarray(self):
        b = BytecodeMultiANewArray.at_check(make_method([Bytecodes.MULTIANEWARRAY, 0x00, 0x03, 0x02]), 0)
        self.assertEqual(b.get_dimensions(), 2)
        self.assertEqual(str(b), "multianewarray #3 dim 2")

    def test_newarray(self):
        b = BytecodeNewArray.at_check(make_method([Bytecodes.NEWARRAY, 10]), 0)
        self.assertEqual(b.get_type_name(), "int")
        self.assertEqual(str(b), "newarray int")

    def test_newarray_illegal_type(self):
        b = BytecodeNewArray.at_check(make_method([Bytecodes.NEWARRAY, 99]), 0)
        self.assertEqual(str(b), "newarray <illegal type 99>")

if __name__ == '__main__':
    unittest.main()
