class ChipError(Exception):
    """Base class for every fatal interpreter error."""

    message = "CHIP-8 error"

    def __str__(self):
        return self.message


class RomTooLargeError(ChipError):
    def __init__(self, overage: int):
        super().__init__(overage)
        self.overage = overage

    def __str__(self):
        return f"Rom too large by {self.overage} bytes"


class AddressOutOfBoundsError(ChipError):
    message = "Address out of bounds"

    def __init__(self, address=None):
        super().__init__(address)
        self.address = address

    def __str__(self):
        if self.address is None:
            return self.message
        return f"{self.message}: 0x{self.address:04X}"


class InvalidInstructionError(ChipError):
    message = "Invalid Instruction was encountered"

    def __init__(self, opcode: int):
        super().__init__(opcode)
        self.opcode = opcode

    def __str__(self):
        return f"{self.message}: 0x{self.opcode:04X}"


class InvalidRegisterError(ChipError):
    message = "Attempt to access invalid register"

    def __init__(self, index: int):
        super().__init__(index)
        self.index = index

    def __str__(self):
        return f"{self.message} V{self.index:X}"


class InvalidSpriteSizeError(ChipError):
    message = "The sprite's size was greater than 15 bytes"

    def __init__(self, size: int):
        super().__init__(size)
        self.size = size
