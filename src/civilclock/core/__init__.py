"""
Ядро civilclock

Календарная математика, записи домена, контракты входов и ошибки.
"""
