"""A tiny 4-bit computer that can be placed in the world."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import BinaryIO

PROGRAM_SIZE = 128
RAM_SIZE = 16
FLAG_RUNNING = 0b0001


class Instruction(IntEnum):
    """Opcodes, stored in the high nibble of a program byte."""

    NOP = 0  # no operation
    STA = 1  # store A to RAM
    LDA = 2  # load A from RAM
    ADM = 3  # add memory to A
    SBM = 4  # subtract memory from A
    IMA = 5  # load immediate into A
    ADI = 6  # add immediate to A
    SBI = 7  # subtract immediate from A
    JP = 8  # jump to address
    JPZ = 9  # jump if A is zero
    JPN = 10  # jump if A is not zero
    IN = 11  # input from sides into A
    OUT = 12  # output A to sides


_JUMPS = frozenset({Instruction.JP, Instruction.JPZ, Instruction.JPN})


def encode_instruction(opcode: int, operand: int) -> int:
    """Pack an opcode and a 4-bit operand into one program byte."""
    return ((opcode << 4) | (operand & 0x0F)) & 0xFF


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise EOFError(f"expected {size} bytes, got {len(data)}")
    return data


@dataclass
class Computer:
    """Program memory, nibble RAM and the A/flags, PC and IO registers."""

    program: bytearray = field(default_factory=lambda: bytearray(PROGRAM_SIZE))
    ram: bytearray = field(default_factory=lambda: bytearray(RAM_SIZE))
    pc: int = 0
    af: int = 0
    io: int = 0

    @property
    def a(self) -> int:
        """The accumulator, held in the high nibble of ``af``."""
        return self.af >> 4

    @a.setter
    def a(self, value: int) -> None:
        self.af = (self.af & 0x0F) | ((value & 0x0F) << 4)

    def write_ram(self, location: int, data: int) -> None:
        """Store a nibble; even locations use the high half of a RAM byte."""
        index = location // 2
        if location % 2 == 0:
            self.ram[index] = ((data & 0x0F) << 4) | (self.ram[index] & 0x0F)
        else:
            self.ram[index] = (self.ram[index] & 0xF0) | (data & 0x0F)

    def read_ram(self, location: int) -> int:
        """Read the nibble at a location."""
        byte = self.ram[location // 2]
        return byte >> 4 if location % 2 == 0 else byte & 0x0F

    def _jump_target(self) -> int:
        # The address byte follows the jump; past the end it wraps to the start.
        return self.program[(self.pc + 1) % PROGRAM_SIZE]

    def step(self) -> None:
        """Execute the instruction at the program counter."""
        byte = self.program[self.pc]
        opcode = byte >> 4
        operand = byte & 0x0F

        match opcode:
            case Instruction.STA:
                self.write_ram(operand, self.a)
            case Instruction.LDA:
                self.a = self.read_ram(operand)
            case Instruction.ADM:
                self.a = self.a + self.read_ram(operand)
            case Instruction.SBM:
                self.a = self.a - self.read_ram(operand)
            case Instruction.IMA:
                self.a = operand
            case Instruction.ADI:
                self.a = self.a + operand
            case Instruction.SBI:
                self.a = self.a - operand
            case Instruction.JP:
                self.pc = self._jump_target()
            case Instruction.JPZ:
                self.pc = self._jump_target() if self.a == 0 else self.pc + 2
            case Instruction.JPN:
                self.pc = self._jump_target() if self.a != 0 else self.pc + 2
            case Instruction.IN:
                self.a = (self.io >> 4) & operand
            case Instruction.OUT:
                self.io = (self.io & 0xF0) | (self.a & operand) | (self.io & 0x0F & ~operand)

        if opcode not in _JUMPS:
            self.pc += 1
        if self.pc >= PROGRAM_SIZE:
            self.pc = 0

    def save(self, stream: BinaryIO) -> None:
        """Write the computer's state to a binary stream."""
        stream.write(bytes(self.program))
        stream.write(bytes(self.ram))
        stream.write(bytes((self.pc, self.af, self.io)))

    @classmethod
    def load(cls, stream: BinaryIO) -> Computer:
        """Read a computer written by :meth:`save`."""
        program = bytearray(_read_exact(stream, PROGRAM_SIZE))
        ram = bytearray(_read_exact(stream, RAM_SIZE))
        pc, af, io = _read_exact(stream, 3)
        return cls(program=program, ram=ram, pc=pc, af=af, io=io)