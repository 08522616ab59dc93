"""
Static question set served when Open Trivia DB is unavailable or rate limited
"""

FALLBACK_QUESTIONS = [
    {
        "category": "General Knowledge",
        "difficulty": "easy",
        "question": "What is the capital city of France?",
        "correct_answer": "Paris",
        "incorrect_answers": ["Lyon", "Marseille", "Nice"],
    },
    {
        "category": "Science & Nature",
        "difficulty": "easy",
        "question": "What is the chemical symbol for gold?",
        "correct_answer": "Au",
        "incorrect_answers": ["Ag", "Gd", "Go"],
    },
    {
        "category": "Science & Nature",
        "difficulty": "easy",
        "question": "Which planet is known as the Red Planet?",
        "correct_answer": "Mars",
        "incorrect_answers": ["Venus", "Jupiter", "Mercury"],
    },
    {
        "category": "Geography",
        "difficulty": "medium",
        "question": "Which is the longest river in South America?",
        "correct_answer": "Amazon",
        "incorrect_answers": ["Paraná", "Orinoco", "São Francisco"],
    },
    {
        "category": "History",
        "difficulty": "medium",
        "question": "In which year did the Berlin Wall fall?",
        "correct_answer": "1989",
        "incorrect_answers": ["1987", "1991", "1985"],
    },
    {
        "category": "Science: Computers",
        "difficulty": "easy",
        "question": "What does &quot;CPU&quot; stand for?",
        "correct_answer": "Central Processing Unit",
        "incorrect_answers": [
            "Central Process Unit",
            "Computer Personal Unit",
            "Central Processor Unit",
        ],
    },
    {
        "category": "Mythology",
        "difficulty": "easy",
        "question": "Who is the Greek god of the sea?",
        "correct_answer": "Poseidon",
        "incorrect_answers": ["Zeus", "Hades", "Apollo"],
    },
    {
        "category": "Entertainment: Books",
        "difficulty": "medium",
        "question": "Who wrote the novel &quot;Nineteen Eighty-Four&quot;?",
        "correct_answer": "George Orwell",
        "incorrect_answers": ["Aldous Huxley", "Ray Bradbury", "H. G. Wells"],
    },
    {
        "category": "Science: Mathematics",
        "difficulty": "easy",
        "question": "What is the square root of 144?",
        "correct_answer": "12",
        "incorrect_answers": ["14", "11", "16"],
    },
    {
        "category": "Animals",
        "difficulty": "easy",
        "question": "What is the largest mammal on Earth?",
        "correct_answer": "Blue Whale",
        "incorrect_answers": ["African Elephant", "Giraffe", "Sperm Whale"],
    },
    {
        "category": "Geography",
        "difficulty": "easy",
        "question": "How many continents are there on Earth?",
        "correct_answer": "7",
        "incorrect_answers": ["5", "6", "8"],
    },
    {
        "category": "Art",
        "difficulty": "easy",
        "question": "Who painted the Mona Lisa?",
        "correct_answer": "Leonardo da Vinci",
        "incorrect_answers": ["Michelangelo", "Raphael", "Vincent van Gogh"],
    },
    {
        "category": "Science & Nature",
        "difficulty": "medium",
        "question": "What is the hardest natural substance?",
        "correct_answer": "Diamond",
        "incorrect_answers": ["Quartz", "Graphite", "Topaz"],
    },
    {
        "category": "Sports",
        "difficulty": "easy",
        "question": "How many players does a soccer team have on the field?",
        "correct_answer": "11",
        "incorrect_answers": ["9", "10", "12"],
    },
    {
        "category": "General Knowledge",
        "difficulty": "medium",
        "question": "Which language has the most native speakers?",
        "correct_answer": "Mandarin Chinese",
        "incorrect_answers": ["English", "Spanish", "Hindi"],
    },
]
