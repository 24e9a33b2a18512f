BUILTIN_QUIZZES = [
    {
        "title": "Technology Fundamentals",
        "description": "Learn the basic concepts of modern technology and computing",
        "level": 1,
        "difficulty": "Beginner",
        "category": "Technology",
        "order": 1,
        "questions": [
            {
                "question": "What does CPU stand for?",
                "options": [
                    "Computer Processing Unit",
                    "Central Processing Unit",
                    "Central Program Unit",
                    "Computer Program Unit",
                ],
                "correct_answer": 1,
                "explanation": "CPU stands for Central Processing Unit, the component that performs calculations and executes instructions.",
            },
            {
                "question": "What is the primary function of RAM in a computer?",
                "options": [
                    "Permanent storage",
                    "Temporary storage for active programs",
                    "Internet connectivity",
                    "Display graphics",
                ],
                "correct_answer": 1,
                "explanation": "RAM provides temporary storage for programs and data that are currently in use.",
            },
            {
                "question": "What does 'www' stand for in web addresses?",
                "options": [
                    "World Wide Web",
                    "World Web Wide",
                    "Web World Wide",
                    "Wide World Web",
                ],
                "correct_answer": 0,
                "explanation": "WWW stands for World Wide Web, the system of interlinked hypertext documents on the Internet.",
            },
        ],
    },
    {
        "title": "Science Basics",
        "description": "Explore fundamental concepts in physics, chemistry, and biology",
        "level": 1,
        "difficulty": "Beginner",
        "category": "Science",
        "order": 2,
        "questions": [
            {
                "question": "What is the chemical symbol for water?",
                "options": ["H2O", "HO2", "H3O", "HO"],
                "correct_answer": 0,
                "explanation": "Water is H2O: two hydrogen atoms and one oxygen atom.",
            },
            {
                "question": "What force keeps planets in orbit around the sun?",
                "options": ["Magnetism", "Gravity", "Friction", "Electricity"],
                "correct_answer": 1,
                "explanation": "Gravity attracts objects with mass toward each other and keeps planets in orbit.",
            },
            {
                "question": "What is the basic unit of life?",
                "options": ["Atom", "Molecule", "Cell", "Tissue"],
                "correct_answer": 2,
                "explanation": "The cell is the basic structural and functional unit of all living organisms.",
            },
        ],
    },
    {
        "title": "Programming Concepts",
        "description": "Understanding software development and programming principles",
        "level": 2,
        "difficulty": "Intermediate",
        "category": "Technology",
        "order": 3,
        "questions": [
            {
                "question": "What is a variable in programming?",
                "options": [
                    "A fixed value",
                    "A container for storing data",
                    "A type of loop",
                    "A programming language",
                ],
                "correct_answer": 1,
                "explanation": "A variable is a named storage location holding data that can change while the program runs.",
            },
            {
                "question": "What does 'debugging' mean in programming?",
                "options": [
                    "Writing new code",
                    "Finding and fixing errors in code",
                    "Deleting old code",
                    "Running a program",
                ],
                "correct_answer": 1,
                "explanation": "Debugging is the process of finding and fixing errors (bugs) in programs.",
            },
            {
                "question": "What is an algorithm?",
                "options": [
                    "A programming language",
                    "A step-by-step procedure to solve a problem",
                    "A type of computer",
                    "A software application",
                ],
                "correct_answer": 1,
                "explanation": "An algorithm is a step-by-step procedure designed to solve a specific problem.",
            },
            {
                "question": "What is the purpose of a loop in programming?",
                "options": [
                    "To store data",
                    "To repeat a block of code",
                    "To create variables",
                    "To end a program",
                ],
                "correct_answer": 1,
                "explanation": "A loop repeats a block of code, avoiding duplication.",
            },
        ],
    },
    {
        "title": "Mathematics Fundamentals",
        "description": "Essential mathematical concepts and problem-solving",
        "level": 2,
        "difficulty": "Intermediate",
        "category": "Mathematics",
        "order": 4,
        "questions": [
            {
                "question": "What is the value of π (pi) approximately?",
                "options": ["3.14159", "2.71828", "1.41421", "1.61803"],
                "correct_answer": 0,
                "explanation": "Pi is approximately 3.14159, the ratio of a circle's circumference to its diameter.",
            },
            {
                "question": "What is the Pythagorean theorem?",
                "options": ["a + b = c", "a² + b² = c²", "a × b = c", "a ÷ b = c"],
                "correct_answer": 1,
                "explanation": "In a right triangle the square of the hypotenuse equals the sum of the squares of the other two sides.",
            },
            {
                "question": "What is a prime number?",
                "options": [
                    "A number divisible by many factors",
                    "A number greater than 10",
                    "A number divisible only by 1 and itself",
                    "An even number",
                ],
                "correct_answer": 2,
                "explanation": "A prime is a natural number greater than 1 whose only divisors are 1 and itself.",
            },
        ],
    },
    {
        "title": "Data Science & Analytics",
        "description": "Advanced concepts in data analysis and machine learning",
        "level": 3,
        "difficulty": "Advanced",
        "category": "Data Science",
        "order": 5,
        "questions": [
            {
                "question": "What is machine learning?",
                "options": [
                    "Programming robots",
                    "A subset of AI that learns from data",
                    "Computer hardware",
                    "A programming language",
                ],
                "correct_answer": 1,
                "explanation": "Machine learning lets computers improve from data without being explicitly programmed.",
            },
            {
                "question": "What is the purpose of data visualization?",
                "options": [
                    "To store data",
                    "To make data easier to understand",
                    "To delete unnecessary data",
                    "To encrypt data",
                ],
                "correct_answer": 1,
                "explanation": "Visualization presents data graphically so complex information is easier to analyze.",
            },
            {
                "question": "What is a neural network?",
                "options": [
                    "A computer network",
                    "A computing system inspired by biological neural networks",
                    "A type of database",
                    "A programming framework",
                ],
                "correct_answer": 1,
                "explanation": "A neural network is a computing system inspired by biological neurons, used to recognize patterns.",
            },
            {
                "question": "What does 'big data' refer to?",
                "options": [
                    "Large file sizes",
                    "Datasets too large for traditional processing",
                    "Important data",
                    "Expensive data storage",
                ],
                "correct_answer": 1,
                "explanation": "Big data means datasets too large or fast-changing for traditional processing methods.",
            },
            {
                "question": "What is statistical correlation?",
                "options": [
                    "Causation between variables",
                    "A measure of linear relationship between variables",
                    "Data storage method",
                    "A type of graph",
                ],
                "correct_answer": 1,
                "explanation": "Correlation measures the strength and direction of a linear relationship, from -1 to +1.",
            },
        ],
    },
    {
        "title": "Advanced Physics & Engineering",
        "description": "Complex concepts in physics, engineering, and applied sciences",
        "level": 4,
        "difficulty": "Expert",
        "category": "Physics",
        "order": 6,
        "questions": [
            {
                "question": "What is quantum entanglement?",
                "options": [
                    "A type of chemical bond",
                    "A phenomenon where particles remain connected",
                    "A mathematical equation",
                    "A type of energy",
                ],
                "correct_answer": 1,
                "explanation": "Entangled particles share a quantum state that cannot be described independently.",
            },
            {
                "question": "What is the theory of relativity primarily about?",
                "options": [
                    "Chemical reactions",
                    "Space, time, and gravity",
                    "Biological evolution",
                    "Computer algorithms",
                ],
                "correct_answer": 1,
                "explanation": "Relativity describes the relationship between space, time, and gravity.",
            },
            {
                "question": "What is thermodynamics?",
                "options": [
                    "Study of motion",
                    "Study of heat and energy transfer",
                    "Study of light",
                    "Study of sound",
                ],
                "correct_answer": 1,
                "explanation": "Thermodynamics deals with heat, work, temperature, and energy transfer.",
            },
            {
                "question": "What is electromagnetic radiation?",
                "options": [
                    "Nuclear decay",
                    "Waves of electric and magnetic fields",
                    "Chemical reactions",
                    "Gravitational waves",
                ],
                "correct_answer": 1,
                "explanation": "Electromagnetic radiation is waves of electric and magnetic fields, including light and radio.",
            },
            {
                "question": "What is the uncertainty principle?",
                "options": [
                    "A mathematical theorem",
                    "A fundamental limit on measurement precision",
                    "A type of probability",
                    "A computer algorithm",
                ],
                "correct_answer": 1,
                "explanation": "Certain pairs of properties of a particle cannot both be known to arbitrary precision.",
            },
            {
                "question": "What is superconductivity?",
                "options": [
                    "Very fast computing",
                    "Zero electrical resistance in materials",
                    "High-speed internet",
                    "Advanced programming",
                ],
                "correct_answer": 1,
                "explanation": "Superconductors show zero electrical resistance below a critical temperature.",
            },
        ],
    },
]
