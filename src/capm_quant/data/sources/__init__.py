"""Coleção de conectores para fontes externas.

Itens disponíveis
-----------------
`yf`
    ``download_price_series`` baixa preços ajustados via Yahoo Finance.

`fred`
    ``download_rate_series`` obtém a taxa livre de risco (% a.a.), ex.: DTB3.

`csv`
    ``load_price_series_csv``/``load_rate_series_csv`` leem painéis locais com
    o mesmo contrato das fontes remotas.

Todos retornam :class:`PriceSeries`/:class:`RateSeries` prontos para
``processing.clean.align_market_data`` e lançam ``DataUnavailableError``
quando o provedor não tem dados para o identificador ou intervalo.

Os módulos são importados sob demanda pelo ``loader`` para que ``yfinance`` e
``pandas_datareader`` só sejam carregados quando a fonte é usada.
"""
