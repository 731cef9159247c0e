"""
Тесты civilclock

Состав:
- tests/unit/ : модульные тесты (календарная математика, зоны, локали,
  форматирование и разбор, Instant, Duration, Interval, Info)
"""
