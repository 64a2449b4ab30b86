#!/usr/bin/env python
"""
Testes para validar a política de timezone e o relógio injetável.

Política:
- Timestamps gravados em UTC (timezone-aware)
- Datas de negócio ("hoje") em America/Campo_Grande (UTC-4)

Uso:
    pytest tests/test_timezone.py -v
"""

import pytest
from datetime import date, datetime, timezone


class TestTimezoneModule:
    """Testes do módulo utils/timezone.py"""

    def test_now_utc_returns_timezone_aware(self):
        """now_utc() deve retornar datetime com timezone UTC."""
        from utils.timezone import now_utc

        result = now_utc()

        assert result.tzinfo is not None, "Deve ser timezone-aware"
        assert result.tzinfo == timezone.utc, "Deve ser UTC"

    def test_now_local_returns_timezone_aware(self):
        """now_local() deve retornar datetime com timezone local."""
        from utils.timezone import now_local, TIMEZONE_LOCAL_NAME

        result = now_local()

        assert result.tzinfo is not None, "Deve ser timezone-aware"
        # pytz timezones têm representações diferentes, comparamos pelo nome
        assert TIMEZONE_LOCAL_NAME in str(result.tzinfo), "Deve ser timezone local"

    def test_to_local_handles_naive_datetime(self):
        """to_local() deve tratar datetime naive como UTC."""
        from utils.timezone import to_local

        naive = datetime(2026, 1, 20, 18, 30, 0)
        local = to_local(naive)

        assert local.tzinfo is not None, "Resultado deve ser timezone-aware"
        # 18:30 UTC deve virar 14:30 local (UTC-4)
        assert local.hour == 14, f"Hora deve ser 14, mas é {local.hour}"

    def test_to_utc_handles_naive_datetime(self):
        """to_utc() deve tratar datetime naive como horário local."""
        from utils.timezone import to_utc

        utc = to_utc(datetime(2026, 1, 20, 14, 30, 0))

        assert utc.tzinfo == timezone.utc
        assert utc.hour == 18

    def test_conversions_handle_none(self):
        from utils.timezone import to_local, to_utc

        assert to_local(None) is None
        assert to_utc(None) is None

    def test_get_utc_now_for_sqlalchemy(self):
        """get_utc_now() deve funcionar como default para SQLAlchemy."""
        from utils.timezone import get_utc_now

        result = get_utc_now()

        assert result.tzinfo == timezone.utc, "Deve ser UTC"


class TestRelogio:
    """Testes do relógio injetável dos serviços."""

    def test_relogio_padrao_hoje_local(self):
        from utils.timezone import Relogio, now_local

        assert Relogio().hoje() == now_local().date()

    def test_relogio_fixo_com_data(self):
        """Data simples vira meio-dia local."""
        from utils.timezone import RelogioFixo

        relogio = RelogioFixo(date(2026, 3, 10))

        assert relogio.hoje() == date(2026, 3, 10)
        assert relogio.agora().hour == 12
        assert relogio.agora_utc().hour == 16

    def test_relogio_fixo_data_local_difere_de_utc(self):
        """23:00 local já é o dia seguinte em UTC; 'hoje' segue o horário local."""
        from utils.timezone import RelogioFixo

        relogio = RelogioFixo(datetime(2026, 3, 10, 23, 0, 0))

        assert relogio.hoje() == date(2026, 3, 10)
        assert relogio.agora_utc().date() == date(2026, 3, 11)

    def test_relogio_fixo_com_instante_utc(self):
        """Instante em UTC é convertido: 02:00 UTC do dia 11 ainda é dia 10 local."""
        from utils.timezone import RelogioFixo

        relogio = RelogioFixo(datetime(2026, 3, 11, 2, 0, 0, tzinfo=timezone.utc))

        assert relogio.hoje() == date(2026, 3, 10)
        assert relogio.agora().hour == 22

    def test_avancar_e_redefinir(self):
        from utils.timezone import RelogioFixo

        relogio = RelogioFixo(date(2026, 3, 10))
        relogio.avancar_dias(31)
        assert relogio.hoje() == date(2026, 4, 10)

        relogio.definir(date(2027, 1, 1))
        assert relogio.hoje() == date(2027, 1, 1)


class TestTimezoneConstants:
    """Testes das constantes de timezone."""

    def test_timezone_local_name(self):
        """Timezone local deve ser America/Campo_Grande."""
        from utils.timezone import TIMEZONE_LOCAL_NAME

        assert TIMEZONE_LOCAL_NAME == "America/Campo_Grande"


class TestModelsUseCorrectTimezone:
    """Testes para verificar que os models usam get_utc_now."""

    @pytest.mark.parametrize("modelo", ["Acordo", "ParcelaAcordo", "PagamentoParcela", "LogAuditoria"])
    def test_created_at_tem_default(self, modelo):
        from sistemas.acordos import models

        created_at_col = getattr(models, modelo).__table__.columns['created_at']
        assert created_at_col.default is not None, "created_at deve ter default"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
