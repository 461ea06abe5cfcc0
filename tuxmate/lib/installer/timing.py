class TimingEstimator:
	"""
	Running mean of successful install durations, used for ETA display only.
	Until the first sample is recorded the estimate is the seed.
	"""

	seed: float = 8.0

	def __init__(self, seed: float | None = None) -> None:
		if seed is not None:
			self.seed = seed

		self._history: list[float] = []
		self._average = self.seed

	@property
	def history(self) -> tuple[float, ...]:
		return tuple(self._history)

	def record(self, seconds: float) -> None:
		seconds = max(0.0, seconds)
		self._average = (sum(self._history) + seconds) / (len(self._history) + 1)
		self._history.append(seconds)

	def estimate(self) -> float:
		# never below one second so remaining * estimate stays meaningful
		return max(1.0, self._average)
