import json
import os
from typing import Optional

class FederalDetails:
	def __init__(self, inflation_rate: float = 0.0, final_year: int = 2060, ref_path: Optional[str] = None):
		"""
		inflation_rate: e.g., 0.03 for 3% growth of contribution limits after the last listed year
		final_year: last year to generate limits for (inclusive)
		ref_path: optional override for the federal-details.json location
		"""
		self.inflation_rate = inflation_rate
		self.final_year = final_year
		self.ref_path = ref_path or os.path.join(os.path.dirname(__file__), '../../reference/federal-details.json')
		self.brackets_by_year = {}
		self.limits_by_year = {}
		self._load_and_build_limits()

	def _load_and_build_limits(self):
		with open(self.ref_path, 'r') as f:
			data = json.load(f)

		tax_years = data.get("taxYears", [])
		if not tax_years:
			raise ValueError("federal-details.json must contain a 'taxYears' array with at least one entry")

		tax_years = sorted(tax_years, key=lambda x: x["year"])

		for i in range(1, len(tax_years)):
			if tax_years[i]["year"] != tax_years[i-1]["year"] + 1:
				raise ValueError(f"Tax years must be sequential. Gap found between {tax_years[i-1]['year']} and {tax_years[i]['year']}")

		for year_data in tax_years:
			year = year_data["year"]
			brackets = []
			for b in year_data["effectiveRateBrackets"]:
				rate = b["rate"]
				if rate > 1:
					rate = rate / 100.0
				brackets.append({"maxIncome": b["maxIncome"], "rate": rate})
			self.brackets_by_year[year] = brackets

			contributions = year_data.get("maxContributions", {})
			self.limits_by_year[year] = {
				"max401k": contributions.get("401k", 0),
				"maxHSA": contributions.get("HSA", 0),
				"maxHSAFamily": contributions.get("HSAFamily", 0)
			}

		self.first_year = tax_years[0]["year"]
		last_specified_year = tax_years[-1]["year"]

		# Years past the reference data reuse the last brackets and grow the limits
		year = last_specified_year + 1
		limits = self.limits_by_year[last_specified_year]
		while year <= self.final_year:
			limits = {key: value * (1 + self.inflation_rate) for key, value in limits.items()}
			self.limits_by_year[year] = dict(limits)
			self.brackets_by_year[year] = [dict(b) for b in self.brackets_by_year[last_specified_year]]
			year += 1

	def _resolve_year(self, year: int) -> int:
		if year < self.first_year:
			return self.first_year
		if year not in self.limits_by_year:
			raise ValueError(f"No federal data available for year {year}")
		return year

	def effectiveRate(self, income: float, year: int) -> float:
		"""
		Returns the simplified effective federal rate for an annual income.
		The whole income is taxed at the rate of the first bracket whose maxIncome covers it.
		"""
		brackets = self.brackets_by_year[self._resolve_year(year)]
		for b in brackets:
			if income <= b["maxIncome"]:
				return b["rate"]
		return brackets[-1]["rate"]

	def contributionLimits(self, year: int) -> dict:
		"""
		Returns a dictionary with the employee contribution limits for the given year.

		Returns:
			dict with keys: max401k, maxHSA, maxHSAFamily
		"""
		return dict(self.limits_by_year[self._resolve_year(year)])

	def max401k(self, year: int) -> float:
		return self.contributionLimits(year)["max401k"]

	def maxHSA(self, year: int, coverage: str = 'single') -> float:
		limits = self.contributionLimits(year)
		return limits["maxHSAFamily"] if coverage == 'family' else limits["maxHSA"]
