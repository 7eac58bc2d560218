import re
from hack_cpu import HackCPU
from src.vm_translator.translator import translate_sources, translate_text
from src.vm_translator.codegen import CodeWriter

SYS = """
function Sys.init 3
    push constant 3000
    pop pointer 0
    push constant 4000
    pop pointer 1
    push constant 100
    push constant 5
    call Foo 1
label AFTER
    pop temp 0
    pop temp 1
label END
    goto END
"""

FOO = """
function Foo 2
    push argument 0
    push constant 2
    add
    pop local 1
    push constant 7777     // el llamado pisa THIS/THAT
    pop pointer 0
    push constant 8888
    pop pointer 1
    push local 1
    return
"""

def _boot(*sources) -> HackCPU:
    return HackCPU(translate_sources(list(sources), bootstrap=True).text())

def test_bootstrap_frame():
    cpu = _boot(("Sys", SYS), ("Foo", FOO))
    cpu.run(until="Sys.init$AFTER")
    # bootstrap: SP=256, call Sys.init 0 -> ARG=256, LCL=261
    assert cpu.ram[1] == 261
    assert cpu.ram[2] == 256

def test_call_return_restores_caller():
    cpu = _boot(("Sys", SYS), ("Foo", FOO))
    cpu.run(until="Sys.init$AFTER")
    assert cpu.ram[1:5] == [261, 256, 3000, 4000]
    # 3 locales + 100 + valor de retorno; el argumento fue consumido
    assert cpu.ram[0] == 266
    assert cpu.stack()[-2:] == [100, 7]
    cpu.run(until="Sys.init$END")
    assert (cpu.ram[5], cpu.ram[6]) == (7, 100)

def test_zero_args_zero_locals():
    sys_src = "function Sys.init 0\ncall Main.seven 0\nlabel END\ngoto END\n"
    main_src = "function Main.seven 0\npush constant 7\nreturn\n"
    cpu = _boot(("Sys", sys_src), ("Main", main_src))
    cpu.run(until="Sys.init$END")
    assert cpu.ram[0] == 262            # 261 + valor de retorno
    assert cpu.stack()[-1] == 7
    assert cpu.ram[1:3] == [261, 256]

def test_net_stack_change_with_arguments():
    sys_src = """
function Sys.init 0
    push constant 1
    push constant 2
    push constant 3
    call Main.sum3 3
label END
    goto END
"""
    main_src = """
function Main.sum3 1
    push argument 0
    push argument 1
    add
    push argument 2
    add
    pop local 0
    push local 0
    return
"""
    cpu = _boot(("Sys", sys_src), ("Main", main_src))
    cpu.run(until="Sys.init$END")
    # SP antes de los argumentos = 261; 3 argumentos consumidos, 1 valor devuelto
    assert cpu.ram[0] == 262
    assert cpu.stack()[-1] == 6

def test_recursive_fibonacci():
    sys_src = "function Sys.init 0\npush constant 10\ncall Main.fib 1\npop temp 0\nlabel END\ngoto END\n"
    main_src = """
function Main.fib 0
    push argument 0
    push constant 2
    lt
    if-goto BASE
    push argument 0
    push constant 1
    sub
    call Main.fib 1
    push argument 0
    push constant 2
    sub
    call Main.fib 1
    add
    return
label BASE
    push argument 0
    return
"""
    cpu = _boot(("Main", main_src), ("Sys", sys_src))
    cpu.run(until="Sys.init$END")
    assert cpu.ram[5] == 55
    assert cpu.ram[0] == 261

def test_statics_inside_functions_follow_file():
    sys_src = "function Sys.init 0\ncall Counter.bump 0\ncall Counter.bump 0\npop temp 0\npop temp 1\nlabel END\ngoto END\n"
    counter_src = "function Counter.bump 0\npush static 0\npush constant 1\nadd\npop static 0\npush static 0\nreturn\n"
    cpu = _boot(("Counter", counter_src), ("Sys", sys_src))
    cpu.run(until="Sys.init$END")
    assert cpu.ram[cpu.address("Counter.0")] == 2
    assert (cpu.ram[5], cpu.ram[6]) == (2, 1)

def test_return_labels_are_unique():
    src = "function Main.main 0\ncall Main.f 0\ncall Main.f 0\ncall Main.f 0\nreturn\n"
    asm = translate_text(src).text()
    labels = re.findall(r"^\((Main\.f\$ret\.\d+)\)$", asm, re.M)
    assert len(labels) == 3 and len(set(labels)) == 3

def test_write_init():
    w = CodeWriter(annotate=False)
    w.write_init()
    lines = w.out.lines
    assert lines[:4] == ["@256", "D=A", "@SP", "M=D"]
    assert "@Sys.init" in lines
    assert "(Sys.init$ret.0)" in lines
    assert lines[-3:] == ["(BOOTSTRAP_HALT)", "@BOOTSTRAP_HALT", "0;JMP"]
    # el bootstrap no abre ninguna función
    assert w.current_function == ""

def test_custom_stack_base():
    w = CodeWriter(stack_base=512, annotate=False)
    w.write_init()
    assert w.out.lines[0] == "@512"
