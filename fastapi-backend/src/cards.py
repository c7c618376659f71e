from reports.kiosk_metrics import (
	MonthlyRecurringRevenueChartCard,
	YearlyRecurringRevenueChartCard,
	DailyVolumeChartCard,
	NewUsersChartCard,
)


ALL_KIOSK_CARDS = [
	MonthlyRecurringRevenueChartCard,
	YearlyRecurringRevenueChartCard,
	DailyVolumeChartCard,
	NewUsersChartCard,
]
