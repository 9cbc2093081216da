"""Base analyzer class for all analysis components of the toolbox."""

from abc import ABC, abstractmethod
from typing import Any


class BaseAnalyser(ABC):
    """Abstract base class for analysis components.

    All analyzers must:
    1. Accept a DatasetView in their constructor
    2. Implement fit() to perform the analysis and return self for chaining
    3. Implement result() to return a frozen dataclass with results

    Analyzers are pure computation; figures are built in :mod:`wine_tlbx.plotting`
    from the result dataclasses.

    ### Adding a New Analyzer

    ```python
    @dataclass(frozen=True)
    class MyAnalysisResult:
        summary: pd.DataFrame

    class MyAnalyzer(BaseAnalyser):
        def __init__(self, view: DatasetView):
            self._view = view
            self._result: MyAnalysisResult | None = None

        def fit(self) -> "MyAnalyzer":
            self._result = MyAnalysisResult(summary=...)
            return self

        def result(self) -> MyAnalysisResult:
            if self._result is None:
                raise ValueError("Call fit() first")
            return self._result
    ```

    Then add a ``make_my_analyzer`` factory to ``BaseDataset`` that builds the
    view with ``analyzer_view()``.
    """

    @abstractmethod
    def fit(self) -> "BaseAnalyser":
        """Fit the analyzer to the data.

        Returns:
            Self for method chaining.
        """
        ...

    @abstractmethod
    def result(self) -> Any:
        """Return analysis results as a frozen dataclass instance.

        Raises:
            ValueError: If fit() has not been called yet.
        """
        ...
