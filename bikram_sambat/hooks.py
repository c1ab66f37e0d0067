app_name = "bikram_sambat"
app_title = "Bikram Sambat Calendar"
app_publisher = "Bikram Sambat Calendar Contributors"
app_description = "Bikram Sambat (Nepali) calendar conversion, date arithmetic and localized formatting for Frappe apps."
app_email = "maintainers@example.com"
app_license = "MIT"

# Boot
boot_session = "bikram_sambat.boot.boot_session"

# Fixtures / Data
fixtures = []
