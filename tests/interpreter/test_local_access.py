import unittest
from bytecode_tracer.transport.method import ByteCodeSource, Method
from bytecode_tracer.interpreter import Bytecodes, BytecodeShapeError
from bytecode_tracer.interpreter.local_access import BytecodeLoad, BytecodeStore, BytecodeRet, BytecodeIinc
from bytecode_tracer.interpreter.bytecode_stream import BytecodeStream

def make_method(data):
    return Method(ByteCodeSource(bytes(data)))

class TestLocalAccess(unittest.TestCase):
    def test_iload(self):
        b = BytecodeLoad.at_check(make_method([Bytecodes.ILOAD, 5]), 0)
        self.assertFalse(b.wide())
        self.assertEqual(b.get_local_var_index(), 5)
        self.assertEqual(str(b), "iload 5")

    def test_wide_aload(self):
        # wide aload 256
        method = make_method([Bytecodes.WIDE, Bytecodes.ALOAD, 0x01, 0x00])
        b = BytecodeLoad.at_check(method, 1)
        self.assertTrue(b.wide())
        self.assertEqual(b.get_local_var_index(), 256)
        self.assertEqual(str(b), "aload 256")

    def test_fast_iload(self):
        b = BytecodeLoad.at_check(make_method([Bytecodes.FAST_ILOAD, 3]), 0)
        self.assertEqual(b.operand(), 3)
        self.assertEqual(str(b), "iload 3 [fast_iload]")

    def test_store(self):
        b = BytecodeStore.at_check(make_method([Bytecodes.ASTORE, 2]), 0)
        self.assertEqual(str(b), "astore 2")
        self.assertIsNone(BytecodeLoad.at_check(make_method([Bytecodes.ASTORE, 2]), 0))

    def test_ret(self):
        b = BytecodeRet.at_check(make_method([Bytecodes.RET, 4]), 0)
        self.assertEqual(str(b), "ret 4")

    def test_iinc(self):
        b = BytecodeIinc.at_check(make_method([Bytecodes.IINC, 1, 0xFF]), 0)
        self.assertEqual(b.get_local_var_index(), 1)
        self.assertEqual(b.get_increment(), -1)
        self.assertEqual(str(b), "iinc 1 by -1")

    def test_wide_iinc(self):
        method = make_method([Bytecodes.WIDE, Bytecodes.IINC, 0x00, 0x02, 0xFF, 0x38])
        b = BytecodeIinc.at_check(method, 1)
        self.assertEqual(b.get_local_var_index(), 2)
        self.assertEqual(b.get_increment(), -200)
        self.assertEqual(str(b), "iinc 2 by -200")

    def test_operand_byte_c4_before_store_is_not_wide(self):
        # ldc #196; astore 5  (ldc のオペランドが wide と同じ 0xC4)
        stream = BytecodeStream(make_method([Bytecodes.LDC, 0xC4, Bytecodes.ASTORE, 5]))
        self.assertEqual(stream.next(), Bytecodes.LDC)
        self.assertEqual(stream.next(), Bytecodes.ASTORE)
        b = BytecodeStore.at_stream(stream, verify=True)
        self.assertFalse(b.wide())
        self.assertEqual(b.get_local_var_index(), 5)
        self.assertEqual(str(b), "astore 5")

    def test_explicit_wide_prefix_overrides_previous_byte(self):
        method = make_method([Bytecodes.BIPUSH, 0xC4, Bytecodes.ILOAD, 5])
        self.assertTrue(BytecodeLoad.at_check(method, 2).wide())
        self.assertEqual(BytecodeLoad.at_check(method, 2, wide_prefix=False).get_local_var_index(), 5)
        self.assertEqual(BytecodeLoad.at(method, 2, verify=True, wide_prefix=False), BytecodeLoad(method, 2))

    def test_strict_shape_message(self):
        with self.assertRaises(BytecodeShapeError) as ctx:
            BytecodeIinc.at(make_method([Bytecodes.ILOAD, 1]), 0, verify=True)
        self.assertEqual(str(ctx.exception), "check iinc")

if __name__ == '__main__':
    unittest.main()
