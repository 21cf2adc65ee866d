from datetime import date, datetime


class Relogio:
    """Fonte de "agora" e "hoje" injetada nos serviços."""

    def agora(self) -> datetime:
        return datetime.now()

    def hoje(self) -> date:
        return self.agora().date()


class RelogioFixo(Relogio):
    """Relógio parado numa data/hora; usado em execuções retroativas e nos testes."""

    def __init__(self, momento):
        if not isinstance(momento, datetime):
            momento = datetime.combine(momento, datetime.min.time())
        self.momento = momento

    def agora(self) -> datetime:
        return self.momento
