from dataclasses import dataclass

from errors import ErrorKind, ParseError


@dataclass
class VariableSlot:
    name: str
    value: int = 0
    is_set: bool = False


class VariableTable:
    """
    Tabela de símbolos das variáveis inteiras.

    Os slots são criados pelo comando `int` durante a análise e só têm o valor
    alterado durante a execução. Não existe remoção.
    """
    def __init__(self, max_variables=1000):
        self.max_variables = max_variables
        self.slots = []
        self.index = {}

    @classmethod
    def from_declarations(cls, names):
        """Reconstrói uma tabela já validada pelo Parser, sem limite de capacidade."""
        names = list(names)
        table = cls(len(names))
        for name in names:
            table.declare(name)
        return table

    def __len__(self):
        return len(self.slots)

    def __contains__(self, name):
        return name in self.index

    def __iter__(self):
        return iter(self.slots)

    def declare(self, name, line_number=None):
        if name in self.index:
            raise ParseError(
                ErrorKind.DUPLICATE_VARIABLE,
                f"Variable {name} is already defined",
                line_number,
            )
        if len(self.slots) >= self.max_variables:
            raise ParseError(
                ErrorKind.CAPACITY_EXCEEDED,
                f"Cannot declare {name}: limit of {self.max_variables} variables reached",
                line_number,
            )
        slot_id = len(self.slots)
        self.slots.append(VariableSlot(name))
        self.index[name] = slot_id
        return slot_id

    def find_declared(self, name):
        return self.index.get(name)

    def find_set(self, name):
        slot_id = self.index.get(name)
        if slot_id is None or not self.slots[slot_id].is_set:
            return None
        return slot_id

    def get(self, slot_id):
        return self.slots[slot_id].value

    def set(self, slot_id, value):
        slot = self.slots[slot_id]
        slot.value = value
        slot.is_set = True

    def values(self):
        """Valores das variáveis já atribuídas, na ordem de declaração."""
        return {slot.name: slot.value for slot in self.slots if slot.is_set}
