"""
Ядро подбора линз: доменные модели, диоптрийная арифметика, контракт данных,
настройки и логирование. Не зависит от matching и от источника таблиц брендов.
"""
