import os
from dotenv import load_dotenv

# Загрузка переменных окружения из .env файла
load_dotenv()

# Логирование
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")

# Ресурсы: часов в календарный день, если у ресурса не указана емкость
DEFAULT_RESOURCE_CAPACITY = float(os.getenv("DEFAULT_RESOURCE_CAPACITY", "8"))

# Трудоемкость задачи, если она не указана
DEFAULT_ESTIMATED_HOURS = float(os.getenv("DEFAULT_ESTIMATED_HOURS", "8"))

# Предел поиска свободного окна ресурса (дней)
RESOURCE_SEARCH_LIMIT_DAYS = int(os.getenv("RESOURCE_SEARCH_LIMIT_DAYS", "365"))

# Допустимое отклонение от базового плана (дней)
BASELINE_VARIANCE_THRESHOLD_DAYS = int(os.getenv("BASELINE_VARIANCE_THRESHOLD_DAYS", "2"))

# Пороги перегрузки ресурса (доля от емкости)
MINOR_OVERALLOCATION_RATIO = 1.2
MAJOR_OVERALLOCATION_RATIO = 1.5
